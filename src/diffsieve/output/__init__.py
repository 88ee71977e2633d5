"""Reporters — terminal summary and JSON."""
