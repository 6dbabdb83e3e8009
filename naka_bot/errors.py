"""Project-level exception hierarchy."""


class NakaError(Exception):
    """Base for all naka-bot exceptions."""


class ConfigError(NakaError):
    """Configuration could not be loaded or is incomplete."""


class DescriptorError(NakaError):
    """An event or command module does not expose a valid descriptor."""


class HandlerLoadError(NakaError):
    """A startup handler could not be resolved or failed while running."""


class ReplyError(NakaError):
    """Sending a reply through the gateway failed."""
