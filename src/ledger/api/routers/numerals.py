from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, HTTPException

from ledger.core.numerals import render_number_words

router = APIRouter(prefix="/numerals", tags=["numerals"])


@router.get("/{value}")
def read_number(value: str) -> dict[str, str]:
    """Spell out a number in Vietnamese words."""
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        raise HTTPException(status_code=400, detail=f"Not a number: {value}")
    if not number.is_finite():
        raise HTTPException(status_code=400, detail=f"Not a finite number: {value}")
    words = render_number_words(number)
    if not words:
        raise HTTPException(status_code=400, detail=f"Number too large to spell out: {value}")
    return {"value": value, "words": words}
