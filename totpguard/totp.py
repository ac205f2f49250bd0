"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Time-step mapping, code generation and window validation with a
caller-owned replay floor.
"""

import logging
import math
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional, Union

from cryptography.hazmat.primitives import hashes

from totpguard.crypto import DEFAULT_ALGORITHM, AlgorithmLike, resolve_algorithm
from totpguard.hotp import SIX_DIGITS, codes_equal, generate_code
from totpguard.utils import decode_secret, validate_digits, validate_step_size

logger = logging.getLogger(__name__)

DEFAULT_STEP_SIZE = 30

Instant = Union[datetime, int, float]
Tolerance = Union[timedelta, int, float]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)
_US_PER_SECOND = 1_000_000


# ── Time-step mapping ─────────────────────────────────────────────────────────

def _instant_micros(instant: Instant) -> int:
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return (instant - _EPOCH) // _MICROSECOND
    if isinstance(instant, int):
        return instant * _US_PER_SECOND
    return math.floor(instant * _US_PER_SECOND)


def _tolerance_micros(tolerance: timedelta) -> int:
    return tolerance // _MICROSECOND


def _step_from_micros(step_size: int, micros: int) -> int:
    # Whole seconds floor like a Unix clock; the step division truncates toward zero.
    seconds = micros // _US_PER_SECOND
    steps = abs(seconds) // step_size
    return steps if seconds >= 0 else -steps


def unix_seconds(instant: Instant) -> int:
    """
    Whole Unix seconds of ``instant``.

    Args:
        instant: A ``datetime`` (naive values are taken as UTC) or a number
                 of seconds since the epoch.
    """
    return _instant_micros(instant) // _US_PER_SECOND


def time_step(step_size: int, instant: Instant) -> int:
    """
    Map ``instant`` to its TOTP counter: Unix seconds / ``step_size``.

    The division truncates toward zero, so instants before the epoch map
    toward counter 0 instead of raising.

    Raises:
        ValueError: If ``step_size`` is not a positive integer.
    """
    validate_step_size(step_size)
    return _step_from_micros(step_size, _instant_micros(instant))


def remaining_seconds(step_size: int = DEFAULT_STEP_SIZE, instant: Optional[Instant] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    validate_step_size(step_size)
    t = unix_seconds(instant if instant is not None else time.time())
    return step_size - (t % step_size)


def generate_totp(
    secret: bytes,
    instant: Optional[Instant] = None,
    digits: int = SIX_DIGITS,
    step_size: int = DEFAULT_STEP_SIZE,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
) -> int:
    """
    Generate a TOTP code.

    Args:
        secret:    Raw shared secret bytes.
        instant:   Moment to generate for (uses time.time() if None).
        digits:    Code modulus (default six digits).
        step_size: Time step in seconds (default 30).
        algorithm: HMAC algorithm (default SHA1).

    Returns:
        Integer code; zero-pad with :func:`totpguard.utils.format_code`.
    """
    t = instant if instant is not None else time.time()
    return generate_code(algorithm, secret, digits, time_step(step_size, t))


# ── Validation ────────────────────────────────────────────────────────────────

class ValidationResult(NamedTuple):
    """Outcome of :meth:`TOTPValidator.validate`.

    ``counter`` is the matched time step when ``matched`` is True. On a
    failed match it is the current time step and must not be stored as the
    replay floor.
    """

    matched: bool
    counter: int


@dataclass(frozen=True)
class TOTPValidator:
    """
    Immutable TOTP validation settings plus the replay floor.

    The validator never changes itself. After a successful
    :meth:`validate`, persist ``result.counter`` (or use :meth:`advance`)
    and supply it as ``last_counter`` on the next call for the same secret.
    Tolerances may be a ``timedelta`` or a number of seconds; negative values
    shift the window instead of widening it.
    """

    secret: bytes = field(repr=False)
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM
    digits: int = SIX_DIGITS
    step_size: int = DEFAULT_STEP_SIZE
    past_tolerance: Tolerance = timedelta(0)
    future_tolerance: Tolerance = timedelta(0)
    last_counter: int = 0
    _hash: hashes.HashAlgorithm = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Secret must be a non-empty byte string.")
        validate_digits(self.digits)
        validate_step_size(self.step_size)
        for name in ("past_tolerance", "future_tolerance"):
            value = getattr(self, name)
            if not isinstance(value, timedelta):
                object.__setattr__(self, name, timedelta(seconds=value))
        object.__setattr__(self, "_hash", resolve_algorithm(self.algorithm))

    @classmethod
    def from_base32(cls, secret: str, **settings) -> "TOTPValidator":
        """
        Build a validator from a base32 secret as shown to authenticator apps.

        Raises:
            ValueError: On invalid base32 input or invalid settings.
        """
        return cls(secret=decode_secret(secret), **settings)

    def window(self, now: Instant) -> tuple[int, int]:
        """Return the inclusive ``(t_min, t_max)`` counter range searched at ``now``."""
        now_us = _instant_micros(now)
        t_min = _step_from_micros(self.step_size, now_us - _tolerance_micros(self.past_tolerance))
        t_max = _step_from_micros(self.step_size, now_us + _tolerance_micros(self.future_tolerance))
        return t_min, t_max

    def validate(self, now: Instant, code: int, last_counter: Optional[int] = None) -> ValidationResult:
        """
        Check ``code`` against every time step in the tolerance window.

        Args:
            now:          Current time.
            code:         Candidate code as an integer.
            last_counter: Replay floor override; defaults to ``self.last_counter``.

        Returns:
            ``(True, t)`` for the earliest matching step ``t`` above the floor,
            otherwise ``(False, time_step(step_size, now))``.
        """
        floor = self.last_counter if last_counter is None else last_counter
        t_min, t_max = self.window(now)
        logger.debug("Searching TOTP steps %d..%d above floor %d", t_min, t_max, floor)

        for t in range(max(t_min, floor + 1), t_max + 1):
            if codes_equal(generate_code(self._hash, self.secret, self.digits, t), code, self.digits):
                logger.debug("TOTP code matched step %d", t)
                return ValidationResult(True, t)

        logger.debug("No TOTP step matched")
        return ValidationResult(False, _step_from_micros(self.step_size, _instant_micros(now)))

    def advance(self, result: ValidationResult) -> "TOTPValidator":
        """Return a copy with the replay floor moved to a matched counter."""
        if not result.matched:
            return self
        return replace(self, last_counter=result.counter)
