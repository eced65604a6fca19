"""Persistence layer for dailyplan."""
