"""Slash commands, one module per command under ``<category>/``."""
