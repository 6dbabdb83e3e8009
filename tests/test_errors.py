"""Tests for the exception hierarchy."""

from naka_bot.errors import (
    ConfigError,
    DescriptorError,
    HandlerLoadError,
    NakaError,
    ReplyError,
)


def test_base_error_is_exception() -> None:
    assert issubclass(NakaError, Exception)


def test_config_error_inherits_base() -> None:
    err = ConfigError("bad config")
    assert isinstance(err, NakaError)
    assert str(err) == "bad config"


def test_loading_errors_inherit_base() -> None:
    assert isinstance(DescriptorError("no descriptor"), NakaError)
    assert isinstance(HandlerLoadError("unknown"), NakaError)


def test_reply_error_inherits_base() -> None:
    assert isinstance(ReplyError("send failed"), NakaError)
