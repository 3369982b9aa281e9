"""Commandry command hosting."""
