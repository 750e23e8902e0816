"""
Deterministic virtual card synthesis.

Card numbers are cosmetic: they are derived from a simple polynomial string
hash of the username and carry no security meaning.
"""

from app.domain.models.user import CardData

CARD_PREFIX = "4532 9901 2234 "
EXPIRY_BASE_YEAR = 27


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(value: str) -> int:
    """
    Absolute value of the 32-bit signed ``h = h * 31 + unit`` hash.

    Iterates UTF-16 code units so the result matches the browser-side
    rendering of the same card.
    """
    data = value.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return abs(h)


def synthesize_card(username: str) -> CardData:
    """Build the card for ``username``. Same input, same card, every time."""
    h = string_hash(username)
    last4 = (h % 9000) + 1000
    month = (h // 10) % 12 + 1
    year = EXPIRY_BASE_YEAR + (h % 5)
    cvv = (h % 900) + 100
    return CardData(
        pan=f"{CARD_PREFIX}{last4}",
        exp=f"{month:02d}/{year:02d}",
        cvv=str(cvv),
        last4=str(last4),
    )
