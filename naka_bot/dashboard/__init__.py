"""Read-only HTTP dashboard over the runtime's tables."""

from naka_bot.dashboard.server import DashboardServer, build_app, format_duration

__all__ = ["DashboardServer", "build_app", "format_duration"]
