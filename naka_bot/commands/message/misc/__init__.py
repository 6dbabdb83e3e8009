"""Miscellaneous commands."""
