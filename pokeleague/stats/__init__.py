"""Per-player, per-deck-type win and loss counters."""
