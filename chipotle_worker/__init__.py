"""Chipotle restaurant and menu worker."""
