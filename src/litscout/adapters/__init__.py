"""Adapters for files, databases and literature APIs."""
