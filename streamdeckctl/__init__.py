"""Scoreboard data helpers for live-stream production: tournament brackets, match details, tweets and timestamp buttons."""

__version__ = "0.5.0"