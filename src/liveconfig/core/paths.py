"""
Path addressing for nested config mappings.

Paths use ``.`` or ``/`` as segment delimiters (``db.host`` == ``db/host``).
A backslash before a delimiter makes it part of the key: ``a\\.b`` addresses
the top-level key ``"a.b"``.
"""

import re
from typing import Any

from liveconfig.config.constants import ESCAPED_DOT_TOKEN, ESCAPED_SLASH_TOKEN

_DELIMITERS = re.compile(r"[./]")


class _Missing:
    """Marker for a path that does not resolve (distinct from a stored None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    """Split a path into key segments, honoring escapes and dropping empties."""
    protected = path.replace("\\.", ESCAPED_DOT_TOKEN).replace("\\/", ESCAPED_SLASH_TOKEN)
    segments = []
    for part in _DELIMITERS.split(protected):
        if not part:
            continue
        segments.append(part.replace(ESCAPED_DOT_TOKEN, ".").replace(ESCAPED_SLASH_TOKEN, "/"))
    return segments


def get_path(target: dict[str, Any], path: str) -> Any:
    """Resolve ``path`` against ``target``.

    Returns ``MISSING`` when any intermediate segment is absent or is not a
    mapping, or when the final key is absent.
    """
    segments = split_path(path)
    if not segments:
        return MISSING

    *parents, key = segments
    node = target
    for part in parents:
        node = node.get(part, MISSING)
        if not isinstance(node, dict):
            return MISSING

    return node.get(key, MISSING)


def set_path(target: dict[str, Any], path: str, value: Any) -> bool:
    """Assign ``value`` at ``path``, creating intermediate mappings.

    Returns False, without touching anything past the conflict, when an
    intermediate segment holds a non-mapping value.
    """
    segments = split_path(path)
    if not segments:
        return False

    *parents, key = segments
    node = target
    for part in parents:
        if part not in node:
            node[part] = {}
        if not isinstance(node[part], dict):
            return False
        node = node[part]

    node[key] = value
    return True


def has_path(target: dict[str, Any], path: str) -> bool:
    """Check whether ``path`` resolves, even to None."""
    return get_path(target, path) is not MISSING
