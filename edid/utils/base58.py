"""
Base58 Alphabet Module

Digit <-> symbol mapping for the Bitcoin Base58 alphabet, which drops the
visually ambiguous characters ``0``, ``O``, ``I`` and ``l``. The alphabet is
ordered by ASCII code point, so zero-padded numbers of equal width sort
lexicographically in numeric order.

Specification: https://en.bitcoin.it/wiki/Base58Check_encoding
"""

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE = len(ALPHABET)
ZERO = ALPHABET[0]

_INDEX = {char: digit for digit, char in enumerate(ALPHABET)}


def encode(num: int, length: int = 0) -> str:
    """Encodes a non-negative integer, left-padding with the zero symbol.

    Args:
        num: The integer to encode.
        length: Minimum width of the result. Longer results are not truncated.

    Returns:
        The base58 representation of ``num``.

    Raises:
        ValueError: If ``num`` is negative.
    """
    if num < 0:
        raise ValueError("base58 encoder requires a non-negative integer")

    chars: list[str] = []
    while num > 0:
        num, rem = divmod(num, BASE)
        chars.append(ALPHABET[rem])
    encoded = "".join(reversed(chars)) if chars else ZERO
    return encoded.rjust(length, ZERO)


def decode(text: str) -> int:
    """Decodes a base58 string back into an integer.

    Raises:
        ValueError: If ``text`` contains a character outside the alphabet.
    """
    num = 0
    for char in text:
        try:
            digit = _INDEX[char]
        except KeyError:
            raise ValueError(f"Invalid base58 character: {char!r}") from None
        num = num * BASE + digit
    return num
