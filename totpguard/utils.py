"""
Utility helpers for totpguard.
"""

import base64
import re
from typing import Optional


# ── Base32 ────────────────────────────────────────────────────────────────────

def normalize_secret(secret: str) -> str:
    """
    Normalise a base32 secret: strip spaces, uppercase, add padding.

    Args:
        secret: Raw user-supplied secret string.

    Returns:
        Uppercase base32 string with correct padding.

    Raises:
        ValueError: If the string contains invalid base32 characters.
    """
    secret = secret.strip().upper().replace(" ", "").replace("-", "")
    # Base32 alphabet: A-Z and 2-7
    if not re.fullmatch(r"[A-Z2-7]+=*", secret):
        raise ValueError("Secret contains invalid base32 characters.")
    pad = (8 - len(secret) % 8) % 8
    return secret + "=" * pad


def decode_secret(secret: str) -> bytes:
    """
    Decode a base32-encoded secret string to raw key bytes.

    Raises:
        ValueError: On invalid base32 input.
    """
    try:
        return base64.b32decode(normalize_secret(secret), casefold=True)
    except ValueError as exc:
        raise ValueError(f"Invalid base32 secret: {exc}") from exc


# ── Digit count ───────────────────────────────────────────────────────────────

def digits_for(count: int) -> int:
    """Return the code modulus for ``count`` decimal digits (6 -> 1_000_000)."""
    if count < 1 or count > 9:
        raise ValueError("Digit count must be between 1 and 9.")
    return 10**count


def digit_width(digits: int) -> int:
    """Number of characters needed to display any code below ``digits``."""
    return len(str(max(digits - 1, 0)))


# ── Display ───────────────────────────────────────────────────────────────────

def format_code(code: int, digits: int, group: Optional[int] = None) -> str:
    """
    Zero-pad a generated code for display, optionally grouping digits.

    Example::

        >>> format_code(81804, 1_000_000)
        "081804"
        >>> format_code(81804, 1_000_000, group=3)
        "081 804"

    Args:
        code:   Integer code as returned by the generator.
        digits: Code modulus the code was generated with.
        group:  Digit grouping size, or None for no spaces.

    Returns:
        Display string.
    """
    text = str(code).zfill(digit_width(digits))
    if not group:
        return text
    return " ".join(text[i : i + group] for i in range(0, len(text), group))


def parse_code(token: str) -> int:
    """
    Parse a user-typed code (``"081 804"``, ``"081-804"``) into an integer.

    Raises:
        ValueError: If anything other than digits remains.
    """
    cleaned = token.strip().replace(" ", "").replace("-", "")
    if not cleaned.isascii() or not cleaned.isdigit():
        raise ValueError("Code must contain only digits.")
    return int(cleaned)


# ── Validation ────────────────────────────────────────────────────────────────

def validate_digits(digits: int) -> None:
    if isinstance(digits, bool) or not isinstance(digits, int) or digits < 1:
        raise ValueError("Digits must be a positive code modulus such as 1_000_000.")


def validate_step_size(step_size: int) -> None:
    if isinstance(step_size, bool) or not isinstance(step_size, int) or step_size < 1:
        raise ValueError("Step size must be a positive whole number of seconds.")
