"""
Override sources.

An override is a (path, value) pair supplied outside the config file that
takes precedence over file content and survives reloads. The store fetches a
fresh snapshot from its source after every load and reload.
"""

import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


def coerce_value(value: str) -> Any:
    """Parse a string value to the matching scalar Python type."""
    lowered = value.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'

    try:
        if '.' not in value:
            return int(value)
        return float(value)
    except ValueError:
        return value


class OverrideSource(ABC):
    """Provider of path-addressed override values."""

    @abstractmethod
    def all_overrides(self) -> dict[str, Any]:
        """Return a snapshot of every override, keyed by path."""

    @abstractmethod
    def set_override(self, path: str, value: Any) -> None:
        """Record a value so it is re-applied after future reloads."""


class MappingOverrides(OverrideSource):
    """In-memory override source."""

    def __init__(self, mapping: Mapping[str, Any] | None = None):
        self._overrides: dict[str, Any] = dict(mapping or {})

    def all_overrides(self) -> dict[str, Any]:
        return dict(self._overrides)

    def set_override(self, path: str, value: Any) -> None:
        self._overrides[path] = value

    def remove_override(self, path: str) -> None:
        self._overrides.pop(path, None)


class CommandLineOverrides(MappingOverrides):
    """Overrides taken from ``--key value`` command-line pairs.

    A flag followed by another flag (or by nothing) is recorded as True.
    Positional arguments are ignored.
    """

    def __init__(self, argv: Sequence[str] | None = None):
        super().__init__(self.parse_args(sys.argv[1:] if argv is None else argv))

    @staticmethod
    def parse_args(argv: Sequence[str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        key = None
        for arg in argv:
            if arg.startswith("--") and len(arg) > 2:
                if key is not None:
                    overrides[key] = True
                key = arg[2:]
            elif key is not None:
                overrides[key] = coerce_value(arg)
                key = None
        if key is not None:
            overrides[key] = True
        return overrides


class EnvironmentOverrides(OverrideSource):
    """Overrides taken from prefixed environment variables.

    ``LIVECONFIG__DB__HOST=db1`` overrides path ``db/host``. Key case is
    lowered. The environment is re-read on every snapshot.
    """

    def __init__(self, prefix: str = "LIVECONFIG__", environ: Mapping[str, str] | None = None):
        self.prefix = prefix
        self._environ = os.environ if environ is None else environ
        self._recorded: dict[str, Any] = {}

    def all_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for name, raw in self._environ.items():
            if not name.startswith(self.prefix) or len(name) == len(self.prefix):
                continue
            path = "/".join(part.lower() for part in name[len(self.prefix):].split("__"))
            overrides[path] = coerce_value(raw)
        overrides.update(self._recorded)
        return overrides

    def set_override(self, path: str, value: Any) -> None:
        self._recorded[path] = value


class ChainedOverrides(OverrideSource):
    """Several sources merged in order; later sources win on equal paths.

    Values recorded with ``set_override`` win over every source.
    """

    def __init__(self, *sources: OverrideSource):
        if not sources:
            raise ValueError("ChainedOverrides needs at least one source")
        self.sources = sources
        self._recorded: dict[str, Any] = {}

    def all_overrides(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for source in self.sources:
            merged.update(source.all_overrides())
        merged.update(self._recorded)
        return merged

    def set_override(self, path: str, value: Any) -> None:
        self._recorded[path] = value
