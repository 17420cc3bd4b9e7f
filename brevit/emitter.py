"""
emitter.py — value tree → ordered path-keyed lines.

Pre-order, depth-first walk. Objects contribute no line of their own; each
array is classified once and rendered as a table, a comma list, or expanded
element by element under indexed paths. Scalars become ``path:value``.
"""

import json
import math
from typing import Any, NamedTuple

from brevit.classifier import Primitive, Uniform, classify_array, value_kind


ROOT_SCALAR_KEY = "value"


class InvalidInputError(ValueError):
    """The value tree holds a cycle or a type outside the supported variant."""


class EncodedLine(NamedTuple):
    """One output line: ``path`` is the bare label, ``body`` everything after it."""
    path: str
    body: str

    def render(self) -> str:
        return self.path + self.body


# ── paths ────────────────────────────────────────────────────────────────────

def field_path(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def index_path(prefix: str, i: int) -> str:
    return f"{prefix}[{i}]"


def path_base(path: str) -> str:
    """Portion of *path* before the first ``[``."""
    idx = path.find("[")
    return path if idx < 0 else path[:idx]


# ── scalar rendering ─────────────────────────────────────────────────────────

def _render_number(val: int | float) -> str:
    if isinstance(val, float):
        if math.isnan(val):
            return "NaN"
        if math.isinf(val):
            return "Infinity" if val > 0 else "-Infinity"
        if val == 0.0:
            return "0"
        s = repr(val)
        if s.endswith(".0") and "e" not in s:
            return s[:-2]
        return s
    return str(val)


def render_scalar(val: Any, path: str = "") -> str:
    """Canonical text for a scalar; strings pass through verbatim."""
    kind = value_kind(val)
    if kind == "null":
        return "null"
    if kind == "bool":
        return "true" if val else "false"
    if kind == "number":
        return _render_number(val)
    if kind == "string":
        return val
    raise InvalidInputError(
        f"unsupported value of type {type(val).__name__} at {path or '<root>'}"
    )


def escape_cell(text: str) -> str:
    """Quote a value destined for a comma-joined context."""
    if "," in text or "\n" in text or '"' in text:
        return '"' + text.replace('"', '\\"') + '"'
    return text


def _render_cell(val: Any, path: str, active: set[int]) -> str:
    kind = value_kind(val)
    if kind in ("object", "array"):
        # nested containers inside a table row are kept as compact JSON
        _check_tree(val, path, active)
        return escape_cell(json.dumps(val, separators=(",", ":"), ensure_ascii=False))
    return escape_cell(render_scalar(val, path))


def _check_tree(val: Any, path: str, active: set[int]) -> None:
    stack: list[tuple[Any, Any]] = [(val, path)]
    while stack:
        node, p = stack.pop()
        if node is _LEAVE:
            active.discard(p)
            continue
        kind = value_kind(node)
        if kind not in ("object", "array"):
            render_scalar(node, p)
            continue
        _enter(node, p, active)
        stack.append((_LEAVE, id(node)))
        stack.extend(_children(node, kind, p))


# ── array formats ────────────────────────────────────────────────────────────

def format_tabular(items: list, keys: tuple[str, ...], prefix: str, active: set[int]) -> str:
    for k in keys:
        if not isinstance(k, str):
            raise InvalidInputError(f"non-string key {k!r} at {prefix or '<root>'}")
    header = f"[{len(items)}]{{{','.join(keys)}}}:"
    rows = []
    for i, item in enumerate(items):
        row_path = index_path(prefix, i)
        rows.append(",".join(
            _render_cell(item.get(k), field_path(row_path, k), active) for k in keys
        ))
    return "\n".join([header, *rows])


def format_primitive(items: list, prefix: str) -> str:
    values = [escape_cell(render_scalar(v, index_path(prefix, i))) for i, v in enumerate(items)]
    return f"[{len(items)}]:{','.join(values)}"


# ── walk ─────────────────────────────────────────────────────────────────────

# stack marker: pop the container id off the active set once its subtree is done
_LEAVE = object()


def _children(node: Any, kind: str, prefix: str) -> list[tuple[Any, str]]:
    if kind == "object":
        for k in node:
            if not isinstance(k, str):
                raise InvalidInputError(f"non-string key {k!r} at {prefix or '<root>'}")
        return [(v, field_path(prefix, k)) for k, v in node.items()]
    return [(v, index_path(prefix, i)) for i, v in enumerate(node)]


def _enter(node: Any, prefix: str, active: set[int]) -> None:
    if id(node) in active:
        raise InvalidInputError(f"cycle detected at {prefix or '<root>'}")
    active.add(id(node))


def emit_lines(value: Any, prefix: str = "") -> list[EncodedLine]:
    """Flatten *value* into encoded lines in pre-order.

    Uses an explicit stack, so nesting depth is not bounded by the
    interpreter's recursion limit.

    Raises:
        InvalidInputError: on cycles or unsupported value types.
    """
    out: list[EncodedLine] = []
    active: set[int] = set()
    stack: list[tuple[Any, Any]] = [(value, prefix)]

    while stack:
        node, path = stack.pop()
        if node is _LEAVE:
            active.discard(path)
            continue

        kind = value_kind(node)
        if kind not in ("object", "array"):
            out.append(EncodedLine(path or ROOT_SCALAR_KEY, f":{render_scalar(node, path)}"))
            continue

        _enter(node, path, active)
        if kind == "array":
            items = list(node)
            shape = classify_array(items)
            line = None
            if not items:
                line = EncodedLine(path, "[0]:")
            elif isinstance(shape, Uniform):
                line = EncodedLine(path, format_tabular(items, shape.keys, path, active))
            elif isinstance(shape, Primitive):
                line = EncodedLine(path, format_primitive(items, path))
            if line is not None:
                out.append(line)
                active.discard(id(node))
                continue

        # objects and Mixed arrays: children in order, then leave
        stack.append((_LEAVE, id(node)))
        stack.extend(reversed(_children(node, kind, path)))

    return out
