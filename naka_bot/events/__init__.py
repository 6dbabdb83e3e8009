"""Gateway event definitions, discovered at startup by the ``event`` handler.

Each module exposes ``event = EventDescriptor(name=..., run=...)`` where
``name`` is a discord.py dispatch name (``ready``, ``message``, ...).
"""
