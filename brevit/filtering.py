"""Keep only selected dotted paths of a value tree (``Filter`` mode)."""

from typing import Any

from brevit.classifier import value_kind

_MISSING = object()


def build_path_trie(paths: list[str]) -> dict:
    """``["a.b", "a.c", "d"]`` → ``{"a": {"b": None, "c": None}, "d": None}``.

    ``None`` means "keep everything below"; a shorter path wins over a longer
    one through the same key.
    """
    trie: dict = {}
    for path in paths:
        parts = [p for p in path.split(".") if p]
        if not parts:
            continue
        node = trie
        for part in parts[:-1]:
            if part in node and node[part] is None:
                break
            node = node.setdefault(part, {})
        else:
            node[parts[-1]] = None
    return trie


def _prune(node: Any, trie: dict | None) -> Any:
    if trie is None:
        return node

    kind = value_kind(node)
    if kind == "object":
        out = {}
        for k, v in node.items():
            if k not in trie:
                continue
            sub = _prune(v, trie[k])
            if sub is not _MISSING:
                out[k] = sub
        return out if out else _MISSING
    if kind == "array":
        # arrays are transparent: the same paths apply to every element
        kept = [sub for sub in (_prune(item, trie) for item in node) if sub is not _MISSING]
        return kept if kept else _MISSING
    return _MISSING


def filter_paths(data: Any, paths: list[str]) -> Any:
    """Prune *data* down to the dotted *paths*, preserving key order.

    With no paths the data is returned unchanged. Paths that match nothing
    are ignored.

    >>> filter_paths({"a": 1, "b": {"c": 2, "d": 3}}, ["b.c"])
    {'b': {'c': 2}}
    """
    trie = build_path_trie(paths)
    if not trie:
        return data
    result = _prune(data, trie)
    if result is _MISSING:
        return [] if value_kind(data) == "array" else {}
    return result
