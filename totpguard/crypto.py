"""
Keyed-hash primitives for totpguard.

Hash selection : SHA-1 / SHA-256 / SHA-512 (or any cryptography HashAlgorithm)
Keyed hash     : HMAC from the ``cryptography`` package
"""

import hmac as _stdlib_hmac
from enum import Enum
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

# ── Constants ────────────────────────────────────────────────────────────────

MIN_DIGEST_SIZE = 20    # dynamic truncation reads up to digest[15 + 4]


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


DEFAULT_ALGORITHM = Algorithm.SHA1

_ALG_MAP: dict[str, type] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}

AlgorithmLike = Union[Algorithm, str, hashes.HashAlgorithm]


# ── Algorithm selection ──────────────────────────────────────────────────────

def resolve_algorithm(algorithm: AlgorithmLike) -> hashes.HashAlgorithm:
    """
    Turn an algorithm selector into a ``cryptography`` hash instance.

    Args:
        algorithm: An :class:`Algorithm`, its name (``"sha256"`` and
                   ``"SHA-256"`` are both accepted) or a ready
                   ``HashAlgorithm`` instance.

    Returns:
        Hash algorithm instance usable with :func:`new_keyed_hash`.

    Raises:
        ValueError: If the name is unknown, the object is not a hash
            algorithm, has a digest shorter than 20 bytes or cannot be used by the
            HMAC backend.
    """
    if isinstance(algorithm, hashes.HashAlgorithm):
        resolved = algorithm
    elif isinstance(algorithm, str):
        name = algorithm.upper().replace("-", "").replace("_", "")
        try:
            resolved = _ALG_MAP[Algorithm(name)]()
        except ValueError:
            raise ValueError(f"Unsupported hash algorithm '{algorithm}'.") from None
    else:
        raise ValueError(f"Expected a hash algorithm, got {type(algorithm).__name__}.")

    if resolved.digest_size < MIN_DIGEST_SIZE:
        raise ValueError(
            f"Hash '{resolved.name}' produces {resolved.digest_size}-byte digests; "
            f"at least {MIN_DIGEST_SIZE} bytes are required."
        )
    try:
        hmac.HMAC(b"\x00", resolved)
    except UnsupportedAlgorithm as exc:
        raise ValueError(f"Hash '{resolved.name}' cannot be used with HMAC: {exc}") from exc
    return resolved


def new_keyed_hash(algorithm: hashes.HashAlgorithm, key: bytes) -> hmac.HMAC:
    """Return a fresh HMAC context for ``key`` (contexts are single-use)."""
    return hmac.HMAC(key, algorithm)


def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return _stdlib_hmac.compare_digest(a.encode(), b.encode())
