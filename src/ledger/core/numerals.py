"""
Vietnamese number-to-words rendering.

Used to spell out transaction amounts for search matching and for the
cashback hint text, e.g. ``1_250_000`` -> ``"Một triệu hai trăm năm mươi nghìn"``.
"""

import math
from decimal import Decimal
from numbers import Number, Rational
from typing import Optional

DIGITS = ["không", "một", "hai", "ba", "bốn", "năm", "sáu", "bảy", "tám", "chín"]

ZERO_WORD = "không"
NEGATIVE_WORD = "âm"
HUNDRED_WORD = "trăm"
TEN_WORD = "mười"
TENS_SUFFIX = "mươi"
ODD_WORD = "lẻ"  # zero tens inside a fully read chunk

# Scale words for the first three base-1000 positions; higher positions
# append one "tỷ" per three positions (nghìn tỷ, triệu tỷ, tỷ tỷ, ...).
BASE_SCALES = ["", "nghìn", "triệu"]
BILLION_WORD = "tỷ"

# Longest integer part that is spelled out; anything longer renders as "".
MAX_DIGITS = 1000
_LIMIT = 10 ** MAX_DIGITS


def scale_word(index: int) -> str:
    """Return the scale word for the base-1000 chunk at ``index``."""
    base = BASE_SCALES[index % 3]
    billions = [BILLION_WORD] * (index // 3)
    return " ".join(part for part in [base, *billions] if part)


def _read_two_digits(number: int, full: bool) -> list[str]:
    tens, ones = divmod(number, 10)
    words: list[str] = []

    if tens > 1:
        words += [DIGITS[tens], TENS_SUFFIX]
        if ones == 1:
            words.append("mốt")
        elif ones == 4:
            words.append("tư")
        elif ones == 5:
            words.append("lăm")
        elif ones:
            words.append(DIGITS[ones])
    elif tens == 1:
        words.append(TEN_WORD)
        if ones == 5:
            words.append("lăm")
        elif ones:
            words.append(DIGITS[ones])
    elif ones:
        if full:
            words.append(ODD_WORD)
        words.append(DIGITS[ones])

    return words


def _read_chunk(number: int, full: bool) -> list[str]:
    """Read a 0-999 chunk; ``full`` forces the hundreds place to be spoken."""
    hundreds, remainder = divmod(number, 100)
    words: list[str] = []
    if hundreds or full:
        words += [DIGITS[hundreds], HUNDRED_WORD]
    if remainder:
        words += _read_two_digits(remainder, full=bool(hundreds) or full)
    return words


def _coerce(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        finite = value.is_finite() if isinstance(value, Decimal) else math.isfinite(value)
        if not finite:
            return None
        if isinstance(value, Decimal) and value.adjusted() >= MAX_DIGITS:
            return None
        # int() truncates toward zero without going through a decimal context
        return int(value)
    if isinstance(value, Rational):
        return int(value)
    if isinstance(value, Number):
        try:
            return _coerce(float(value))
        except (TypeError, OverflowError):
            return None
    return None


def render_number_words(value) -> str:
    """
    Spell out an integer in Vietnamese.

    ``None``, NaN, infinities, non-numeric values and integers longer than
    ``MAX_DIGITS`` digits render as ``""``.
    Zero chunks between two spoken chunks are read explicitly, so
    ``1_000_023`` becomes ``"Một triệu không nghìn không trăm hai mươi ba"``.
    """
    number = _coerce(value)
    if number is None or abs(number) >= _LIMIT:
        return ""
    if number == 0:
        return ZERO_WORD.capitalize()

    negative = number < 0
    remaining = abs(number)

    chunks: list[int] = []
    while remaining:
        remaining, chunk = divmod(remaining, 1000)
        chunks.append(chunk)

    # Index of the least significant nonzero chunk; zero chunks below it are trailing.
    lowest = next(i for i, chunk in enumerate(chunks) if chunk)

    words: list[str] = []
    spoken = False
    for index in range(len(chunks) - 1, -1, -1):
        chunk = chunks[index]
        scale = scale_word(index)
        if chunk:
            words += _read_chunk(chunk, full=spoken)
            if scale:
                words.append(scale)
            spoken = True
        elif spoken and index > lowest:
            words.append(ZERO_WORD)
            if scale:
                words.append(scale)

    if negative:
        words.insert(0, NEGATIVE_WORD)

    text = " ".join(" ".join(words).split())
    return text[:1].upper() + text[1:]
