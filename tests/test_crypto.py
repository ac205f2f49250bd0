"""Tests for totpguard.crypto."""

import pytest
from cryptography.hazmat.primitives import hashes

from totpguard.crypto import (
    MIN_DIGEST_SIZE,
    Algorithm,
    constant_time_compare,
    new_keyed_hash,
    resolve_algorithm,
)


# ── Algorithm selection ───────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "selector,expected",
    [
        (Algorithm.SHA1, hashes.SHA1),
        (Algorithm.SHA256, hashes.SHA256),
        (Algorithm.SHA512, hashes.SHA512),
        ("sha1", hashes.SHA1),
        ("SHA-256", hashes.SHA256),
        ("sha_512", hashes.SHA512),
    ],
)
def test_resolve_named_algorithms(selector, expected) -> None:
    assert isinstance(resolve_algorithm(selector), expected)


def test_resolve_passes_hash_instances_through() -> None:
    alg = hashes.SHA3_256()
    assert resolve_algorithm(alg) is alg


def test_resolve_unknown_name_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported"):
        resolve_algorithm("md4")


def test_resolve_non_hash_raises() -> None:
    with pytest.raises(ValueError):
        resolve_algorithm(42)  # type: ignore[arg-type]


def test_resolve_hmac_incompatible_hash_raises() -> None:
    # Extendable-output hashes meet the digest length but HMAC rejects them
    with pytest.raises(ValueError, match="HMAC"):
        resolve_algorithm(hashes.SHAKE128(32))


def test_resolve_short_digest_raises() -> None:
    assert hashes.MD5.digest_size < MIN_DIGEST_SIZE
    with pytest.raises(ValueError, match="at least 20 bytes"):
        resolve_algorithm(hashes.MD5())


# ── Keyed hash ────────────────────────────────────────────────────────────────

def test_new_keyed_hash_rfc2202_vector() -> None:
    # RFC 2202 test case 2 for HMAC-SHA-1
    h = new_keyed_hash(hashes.SHA1(), b"Jefe")
    h.update(b"what do ya want for nothing?")
    assert h.finalize().hex() == "effcdf6ae5eb2fa2d27416d5f184df9c259a7c79"


def test_new_keyed_hash_digest_length() -> None:
    for alg in (hashes.SHA1(), hashes.SHA256(), hashes.SHA512()):
        h = new_keyed_hash(alg, b"key")
        h.update(b"\x00" * 8)
        assert len(h.finalize()) == alg.digest_size


# ── Comparison ────────────────────────────────────────────────────────────────

def test_constant_time_compare() -> None:
    assert constant_time_compare("081804", "081804")
    assert not constant_time_compare("081804", "81804")
