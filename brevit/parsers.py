"""Extensible parser registry for structured string input.

Ships with JSON and YAML parsers. Which of them the client tries is set by
``BrevitConfig.input_formats``; more formats can be added via
``register_parser()``.
"""

import json
from typing import Any, Callable, NamedTuple

import yaml


class Parser(NamedTuple):
    """A pluggable input parser.

    Attributes:
        name: Short identifier used in ``input_formats`` and error messages.
        try_parse: ``(text) -> (data, name) | None``.  Return parsed data and
            the parser name on success, or ``None`` to signal "not my format".
    """
    name: str
    try_parse: Callable[[str], tuple[Any, str] | None]


# ── built-in parsers ─────────────────────────────────────────────────────

def looks_like_json_container(text: str) -> bool:
    trimmed = text.strip()
    return (
        (trimmed.startswith("{") and trimmed.endswith("}"))
        or (trimmed.startswith("[") and trimmed.endswith("]"))
    )


def _try_json(text: str) -> tuple[Any, str] | None:
    if not looks_like_json_container(text):
        return None
    try:
        return json.loads(text), "json"
    except (json.JSONDecodeError, TypeError):
        return None


def _try_yaml(text: str) -> tuple[Any, str] | None:
    try:
        data = yaml.safe_load(text)
        # plain scalars and empty documents are text, not structure
        if isinstance(data, (dict, list)):
            return data, "yaml"
    except yaml.YAMLError:
        pass
    return None


# ── registry ─────────────────────────────────────────────────────────────

PARSER_REGISTRY: list[Parser] = [
    Parser(name="json", try_parse=_try_json),
    Parser(name="yaml", try_parse=_try_yaml),
]


def register_parser(parser: Parser, *, priority: int | None = None) -> None:
    """Add a parser to the registry.

    Args:
        parser: The ``Parser`` to register.
        priority: Insert position (0 = highest priority).  When ``None`` the
            parser is appended (lowest priority, tried last).
    """
    if priority is None:
        PARSER_REGISTRY.append(parser)
    else:
        PARSER_REGISTRY.insert(priority, parser)


# ── public entry point ───────────────────────────────────────────────────

def parse_input(text: str, *, formats: list[str] | None = None) -> tuple[Any, str]:
    """Parse *text* with the first matching parser in the registry.

    Args:
        text: Raw input string.
        formats: Parser names allowed for this call, or ``None`` for all.
            Registry order still decides which is tried first.

    Returns:
        ``(parsed_data, format_name)``.

    Raises:
        ValueError: No allowed parser could parse the input.
    """
    candidates = [p for p in PARSER_REGISTRY if formats is None or p.name in formats]
    for p in candidates:
        result = p.try_parse(text)
        if result is not None:
            return result

    names = ", ".join(p.name for p in candidates) or "(no parsers)"
    raise ValueError(f"Input is not valid {names}")
