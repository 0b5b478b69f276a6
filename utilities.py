# utilities.py
from __future__ import annotations

import string
from typing import List

# ────────────────────────────────────────────────────────────────────────
#  0. Alphabet
# ────────────────────────────────────────────────────────────────────────

ALPHABET = string.ascii_uppercase
SIZE = len(ALPHABET)


# ────────────────────────────────────────────────────────────────────────
#  1. Letter / number / index conversions
# ────────────────────────────────────────────────────────────────────────


def letter_to_index(letter: str) -> int:
    """'A' (or 'a') -> 0 … 'Z' -> 25."""
    return ord(letter[0].upper()) - ord("A")


def index_to_letter(index: int) -> str:
    return ALPHABET[index]


def number_to_index(number: str) -> int:
    """'1' -> 0 … '26' -> 25."""
    return int(number) - 1


def index_to_number(index: int) -> str:
    return str(index + 1)


def string_to_index(text: str) -> int:
    """Accept either a ring/offset label in letter form or in number form."""
    text = text.strip()
    if not text:
        raise ValueError("Empty ring / offset label")
    if not text[0].isdigit() and len(text) != 1:
        raise ValueError(f"Label {text!r} is not a single letter")
    index = number_to_index(text) if text[0].isdigit() else letter_to_index(text)
    if not 0 <= index < SIZE:
        raise ValueError(f"Label {text!r} out of range A–Z / 1–26")
    return index


def index_to_string(index: int, use_letters: bool = True) -> str:
    """Render an index the way the operator asked to see rings and offsets."""
    return index_to_letter(index) if use_letters else index_to_number(index)


def is_letter(ch: str) -> bool:
    return len(ch) == 1 and ch in ALPHABET


# ────────────────────────────────────────────────────────────────────────
#  2. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str) -> str:
    """Upper-case and drop everything the keyboard has no key for."""
    return "".join(ch for ch in msg.upper() if ch in ALPHABET)


def group_blocks(text: str, block: int = 5) -> List[str]:
    """Split *text* into the traditional 5-letter groups."""
    return [text[i : i + block] for i in range(0, len(text), block)]


__all__ = [
    "ALPHABET",
    "SIZE",
    "letter_to_index",
    "index_to_letter",
    "number_to_index",
    "index_to_number",
    "string_to_index",
    "index_to_string",
    "is_letter",
    "preprocess_message",
    "group_blocks",
]
