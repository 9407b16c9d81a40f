"""Core settings logic."""
