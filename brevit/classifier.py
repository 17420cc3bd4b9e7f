"""Array shape classification.

Every array the emitter meets is sorted into one of three shapes:

  Uniform(keys)  all elements are dicts sharing one key set -> tabular rows
  Primitive      all elements are scalars                   -> one comma line
  Mixed          anything else (and the empty array)        -> per-element lines
"""

from dataclasses import dataclass
from typing import Any


SCALAR_KINDS = frozenset({"null", "bool", "number", "string"})


def value_kind(val: Any) -> str:
    if val is None:   return "null"
    if isinstance(val, bool):  return "bool"
    if isinstance(val, (int, float)):  return "number"
    if isinstance(val, str):   return "string"
    if isinstance(val, (list, tuple)):  return "array"
    if isinstance(val, dict):  return "object"
    return "unknown"


def is_scalar(val: Any) -> bool:
    return value_kind(val) in SCALAR_KINDS


@dataclass(frozen=True)
class Uniform:
    """Records sharing one key set; ``keys`` follows the first element's order."""
    keys: tuple[str, ...]


@dataclass(frozen=True)
class Primitive:
    pass


@dataclass(frozen=True)
class Mixed:
    pass


ArrayShape = Uniform | Primitive | Mixed


def uniform_keys(items: list) -> tuple[str, ...] | None:
    """Return the first element's keys if every element has the same key set.

    Key order may differ between elements; only the set is compared.
    """
    if not items or not isinstance(items[0], dict):
        return None
    first_keys = tuple(items[0])
    first_set = set(first_keys)
    for item in items[1:]:
        if not isinstance(item, dict):
            return None
        if len(item) != len(first_keys):
            return None
        if not all(k in first_set for k in item):
            return None
    return first_keys


def classify_array(items: list) -> ArrayShape:
    keys = uniform_keys(items)
    if keys is not None:
        return Uniform(keys)
    if items and all(is_scalar(x) for x in items):
        return Primitive()
    return Mixed()
