"""Token counting and compression stats."""

import logging
from functools import lru_cache

import tiktoken

logger = logging.getLogger("brevit")

ENCODING_NAME = "cl100k_base"


@lru_cache(maxsize=1)
def _encoding():
    # encoding data is fetched on first use; offline hosts fall back to len/4
    try:
        return tiktoken.get_encoding(ENCODING_NAME)
    except Exception as exc:
        logger.warning("tiktoken encoding %s unavailable (%s); using len/4 estimate", ENCODING_NAME, exc)
        return None


def token_method() -> str:
    return f"tiktoken/{ENCODING_NAME}" if _encoding() is not None else "len/4 estimate"


def count_tokens(text: str) -> int:
    enc = _encoding()
    if enc is None:
        return len(text) // 4
    return len(enc.encode(text, disallowed_special=()))


def stats(orig: str, cond: str, orig_tok: int | None = None) -> dict:
    oc, cc = len(orig), len(cond)
    ot = orig_tok if orig_tok is not None else count_tokens(orig)
    ct = count_tokens(cond)
    return {
        "orig_chars": oc, "cond_chars": cc,
        "orig_tok": ot, "cond_tok": ct,
        "char_pct": round((1 - cc/oc)*100, 1) if oc else 0,
        "tok_pct": round((1 - ct/ot)*100, 1) if ot else 0,
        "method": token_method(),
    }
