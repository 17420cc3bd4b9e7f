"""
encoder.py — value tree → compact line-oriented text for LLM consumption.

Pipeline:
  1. emit_lines: classify arrays and flatten the tree into path-keyed lines.
  2. abbreviate: alias repeated path prefixes when it pays for itself.
  3. join: alias definitions first, then the (rewritten) lines.

Example:
    >>> encode({"user": {"name": "John", "email": "j@x.com"}})
    'user.name:John\\nuser.email:j@x.com'
"""

from typing import Any

from brevit.abbreviator import abbreviate
from brevit.emitter import emit_lines
from brevit.options import EncodeOptions


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """Encode *value* into brevit's flattened text format.

    Deterministic: the same value and options always give the same string.
    No trailing newline.

    Raises:
        InvalidInputError: the tree holds a cycle or an unsupported type.
    """
    if options is None:
        options = EncodeOptions()
    lines = emit_lines(value)
    definitions, rendered = abbreviate(lines, options)
    return "\n".join(definitions + rendered)
