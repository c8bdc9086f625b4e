"""Skirmish: a chess rules engine and short-match runner."""

__version__ = "0.1.0"
