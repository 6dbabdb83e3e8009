"""Prefix and slash command definitions, discovered at startup."""
