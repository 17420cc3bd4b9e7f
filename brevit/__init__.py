"""brevit — flatten structured data into compact, token-efficient text for LLMs."""

from brevit.abbreviator import abbreviate, apply_abbreviation, build_abbreviations
from brevit.classifier import Mixed, Primitive, Uniform, classify_array
from brevit.client import BrevitClient
from brevit.config import (
    BrevitConfig,
    ImageOptimizationMode,
    JsonOptimizationMode,
    TextOptimizationMode,
)
from brevit.emitter import EncodedLine, InvalidInputError, emit_lines
from brevit.encoder import encode
from brevit.options import EncodeOptions
from brevit.parsers import PARSER_REGISTRY, Parser, parse_input, register_parser

__all__ = [
    "encode",
    "EncodeOptions",
    "InvalidInputError",
    "classify_array",
    "Uniform",
    "Primitive",
    "Mixed",
    "emit_lines",
    "EncodedLine",
    "abbreviate",
    "build_abbreviations",
    "apply_abbreviation",
    "BrevitClient",
    "BrevitConfig",
    "JsonOptimizationMode",
    "TextOptimizationMode",
    "ImageOptimizationMode",
    "parse_input",
    "Parser",
    "PARSER_REGISTRY",
    "register_parser",
]
