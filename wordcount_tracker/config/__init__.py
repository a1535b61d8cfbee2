"""Tracker configuration loading and validation."""
