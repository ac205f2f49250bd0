"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import logging
import struct
from typing import Optional

from totpguard.crypto import (
    DEFAULT_ALGORITHM,
    AlgorithmLike,
    constant_time_compare,
    new_keyed_hash,
    resolve_algorithm,
)
from totpguard.utils import format_code

logger = logging.getLogger(__name__)

SIX_DIGITS = 1_000_000
SEVEN_DIGITS = SIX_DIGITS * 10
EIGHT_DIGITS = SEVEN_DIGITS * 10

_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


def dynamic_truncate(digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation to an HMAC digest.

    Returns:
        31-bit unsigned integer read at the offset given by the low nibble
        of the last digest byte.
    """
    offset = digest[-1] & 0x0F
    return struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF


def generate_code(
    algorithm: AlgorithmLike,
    secret: bytes,
    digits: int,
    counter: int,
) -> int:
    """
    Generate an HOTP code.

    Args:
        algorithm: HMAC hash selector.
        secret:    Raw shared secret bytes.
        digits:    Code modulus, e.g. :data:`SIX_DIGITS`.
        counter:   Counter value. Negative values are serialised as their
                   64-bit two's-complement pattern.

    Returns:
        Integer code in ``[0, digits - 1]``, not zero-padded.
    """
    msg = struct.pack(">Q", counter & _UINT64_MASK)
    h = new_keyed_hash(resolve_algorithm(algorithm), secret)
    h.update(msg)
    return dynamic_truncate(h.finalize()) % digits


def codes_equal(expected: int, candidate: int, digits: int) -> bool:
    """Compare two codes in constant time on their zero-padded form."""
    return constant_time_compare(
        format_code(expected, digits), format_code(candidate, digits)
    )


def validate_hotp(
    code: int,
    secret: bytes,
    counter: int,
    digits: int = SIX_DIGITS,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    look_ahead: int = 10,
) -> Optional[int]:
    """
    Validate an HOTP code and return the synchronised counter value.

    Args:
        code:       Code to validate.
        secret:     Raw secret bytes.
        counter:    Next counter value the client is expected to use.
        digits:     Code modulus.
        algorithm:  HMAC hash selector.
        look_ahead: Max steps to search ahead for resync.

    Returns:
        The counter to expect next (matched counter + 1), or None if invalid.
    """
    hash_alg = resolve_algorithm(algorithm)
    for i in range(look_ahead + 1):
        if codes_equal(generate_code(hash_alg, secret, digits, counter + i), code, digits):
            if i:
                logger.debug("HOTP resynchronised %d step(s) ahead", i)
            return counter + i + 1
    return None
