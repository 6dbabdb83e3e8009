"""Informational commands."""
