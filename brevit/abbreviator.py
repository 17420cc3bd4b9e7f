"""Prefix abbreviation for emitted lines.

Dotted path prefixes that repeat often enough are replaced by ``@alias`` and
declared once as ``@alias=prefix`` at the top of the output. An alias is only
introduced when the characters it saves across all uses exceed the cost of
its definition line.
"""

import logging
import string
from collections import Counter
from typing import Iterable

from brevit.emitter import EncodedLine, path_base
from brevit.options import EncodeOptions

logger = logging.getLogger("brevit")


def candidate_prefixes(path: str) -> list[str]:
    """Strict dotted prefixes of the part of *path* before its first ``[``."""
    parts = path_base(path).split(".")
    return [".".join(parts[:i]) for i in range(1, len(parts))]


def count_prefixes(paths: Iterable[str]) -> Counter:
    counts: Counter = Counter()
    for path in paths:
        counts.update(candidate_prefixes(path))
    return counts


def counter_alias(n: int) -> str:
    """0 -> a, 25 -> z, 26 -> aa, 27 -> ab, ..."""
    out = ""
    while True:
        out = string.ascii_lowercase[n % 26] + out
        n = n // 26 - 1
        if n < 0:
            return out


def generate_alias(prefix: str, counter: int, used: set[str]) -> str:
    """Pick a short alias for *prefix* that is not in *used*.

    Tries the first letter, then the initials of each segment (up to three
    characters), then a counter-derived token starting at *counter*.
    The caller decides whether to add the result to *used*.
    """
    parts = prefix.split(".")
    if parts[0]:
        first = parts[0][0].lower()
        if first not in used:
            return first

    if len(parts) > 1 and all(parts):
        initials = "".join(p[0] for p in parts).lower()
        if len(initials) <= 3 and initials not in used:
            return initials

    n = counter
    while counter_alias(n) in used:
        n += 1
    return counter_alias(n)


def is_net_beneficial(prefix: str, alias: str, count: int) -> bool:
    savings = (len(prefix) - len(alias) - 1) * count
    definition_cost = len(prefix) + len(alias) + 3
    return savings > definition_cost


def build_abbreviations(paths: list[str], options: EncodeOptions) -> tuple[dict[str, str], list[str]]:
    """Return ``(prefix -> alias table, definition lines)`` for *paths*."""
    if not options.enable_abbreviations:
        return {}, []

    counts = count_prefixes(paths)
    frequent = [(p, c) for p, c in counts.items() if c >= options.abbreviation_threshold]
    # more frequent first, then shorter; stable for full ties
    frequent.sort(key=lambda pc: (-pc[1], len(pc[0])))

    table: dict[str, str] = {}
    definitions: list[str] = []
    used: set[str] = set()
    for prefix, count in frequent:
        alias = generate_alias(prefix, len(table), used)
        # reserved even when rejected below
        used.add(alias)
        if not is_net_beneficial(prefix, alias, count):
            continue
        table[prefix] = alias
        definitions.append(f"@{alias}={prefix}")

    if table:
        logger.debug(
            "abbreviations candidates=%d accepted=%d", len(frequent), len(table),
        )
    return table, definitions


def apply_abbreviation(path: str, table: dict[str, str]) -> str:
    """Rewrite the longest matching prefix of *path*, at most once."""
    if not table:
        return path
    base = path_base(path)
    best = ""
    for prefix in table:
        if base.startswith(prefix + ".") and len(prefix) > len(best):
            best = prefix
    if not best:
        return path
    return f"@{table[best]}{path[len(best):]}"


def abbreviate(lines: list[EncodedLine], options: EncodeOptions) -> tuple[list[str], list[str]]:
    """Return ``(definitions, rewritten rendered lines)``."""
    table, definitions = build_abbreviations([ln.path for ln in lines], options)
    rewritten = [ln._replace(path=apply_abbreviation(ln.path, table)).render() for ln in lines]
    return definitions, rewritten
