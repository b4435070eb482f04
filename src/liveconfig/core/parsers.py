"""
Text parsers for config file content.

A parser takes the decoded file text and returns the parsed value. Any
exception it raises is treated as malformed content.
"""

import json
from collections.abc import Callable
from typing import Any

import yaml

Parser = Callable[[str], Any]


def parse_json(text: str) -> Any:
    """Default parser."""
    return json.loads(text)


def parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


PARSERS: dict[str, Parser] = {
    ".json": parse_json,
    ".yml": parse_yaml,
    ".yaml": parse_yaml,
}


def parser_for(path: str) -> Parser:
    """Pick a parser by file extension, falling back to JSON."""
    for suffix, parser in PARSERS.items():
        if path.lower().endswith(suffix):
            return parser
    return parse_json


def read_text(path: str) -> str:
    """Read the whole config file as UTF-8 text."""
    with open(path, encoding='utf-8') as f:
        return f.read()
