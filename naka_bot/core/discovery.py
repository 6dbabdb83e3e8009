"""Module discovery: scan a package for units and resolve their descriptors."""

from __future__ import annotations

import asyncio
import importlib
import logging
import pkgutil
from dataclasses import dataclass, field
from typing import TypeVar

from naka_bot.errors import DescriptorError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class LoadReport:
    """Outcome of one discovery pass: loaded names and ``(source, error)`` pairs."""

    loaded: list[str] = field(default_factory=list)
    failures: list[tuple[str, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def discover_modules(package: str) -> list[str]:
    """Return dotted names of all non-package modules below *package*, sorted.

    Modules whose name starts with an underscore are skipped.
    """
    pkg = importlib.import_module(package)
    found: list[str] = []
    for info in pkgutil.walk_packages(pkg.__path__, prefix=f"{package}."):
        if info.ispkg or info.name.rsplit(".", 1)[-1].startswith("_"):
            continue
        found.append(info.name)
    return sorted(found)


def resolve_descriptor(module_name: str, attr: str, expected: type[T]) -> T:
    """Import *module_name* and return its *attr*, validated against *expected*.

    Raises:
        DescriptorError: import failed, attribute missing, wrong type, or no name.
    """
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:
        msg = f"{module_name}: import failed ({exc})"
        raise DescriptorError(msg) from exc

    value = getattr(module, attr, None)
    if not isinstance(value, expected):
        msg = f"{module_name}: no {expected.__name__} named '{attr}'"
        raise DescriptorError(msg)
    if not getattr(value, "name", None):
        msg = f"{module_name}: {expected.__name__} has no name"
        raise DescriptorError(msg)
    return value


async def resolve_descriptor_async(module_name: str, attr: str, expected: type[T]) -> T:
    """Resolve a descriptor off the event loop so module imports never block dispatch."""
    return await asyncio.to_thread(resolve_descriptor, module_name, attr, expected)


def short_name(module_name: str) -> str:
    return module_name.rsplit(".", 1)[-1]
