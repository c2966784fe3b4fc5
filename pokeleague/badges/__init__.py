"""Gym badges: one holder per deck type per season."""
