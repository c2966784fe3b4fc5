"""Pokeball achievement ladder."""
