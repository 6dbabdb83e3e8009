"""Prefix (text message) commands, one module per command under ``<category>/``."""
