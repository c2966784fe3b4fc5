"""Global constants for the pokeleague application."""

# Collection names
SEASONS_COLLECTION = "seasons"
MATCHES_COLLECTION = "matches"
DECK_TYPE_STATS_COLLECTION = "deck_type_stats"
GYM_BADGES_COLLECTION = "gym_badges"
PLAYER_BADGES_COLLECTION = "player_badges"
ACHIEVEMENTS_COLLECTION = "achievements"
PLAYER_ACHIEVEMENTS_COLLECTION = "player_achievements"

# Match lifecycle
MATCH_STATUS_SCHEDULED = "scheduled"
MATCH_STATUS_COMPLETED = "completed"
MATCH_STATUS_CANCELLED = "cancelled"

# Season lifecycle
SEASON_STATUS_ACTIVE = "active"
SEASON_STATUS_COMPLETED = "completed"

# Achievement-related constants
STREAK_LOOKBACK = 10
TOP_PLAYER_MIN_WINS = 100
TOP_TIER_KIND = "master_ball"

# Scores written on completion
WINNER_SCORE = 1
LOSER_SCORE = 0
