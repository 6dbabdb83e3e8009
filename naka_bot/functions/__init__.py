"""Command bodies shared by the prefix and slash variants of a command."""
