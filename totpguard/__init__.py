"""
totpguard – HOTP (RFC 4226) and TOTP (RFC 6238) code generation and validation.
"""

from totpguard.crypto import Algorithm, resolve_algorithm
from totpguard.hotp import (
    EIGHT_DIGITS,
    SEVEN_DIGITS,
    SIX_DIGITS,
    generate_code,
    validate_hotp,
)
from totpguard.totp import (
    DEFAULT_STEP_SIZE,
    TOTPValidator,
    ValidationResult,
    generate_totp,
    remaining_seconds,
    time_step,
)
from totpguard.utils import decode_secret, format_code, parse_code

__version__ = "1.0.0"

__all__ = [
    "Algorithm",
    "DEFAULT_STEP_SIZE",
    "EIGHT_DIGITS",
    "SEVEN_DIGITS",
    "SIX_DIGITS",
    "TOTPValidator",
    "ValidationResult",
    "decode_secret",
    "format_code",
    "generate_code",
    "generate_totp",
    "parse_code",
    "remaining_seconds",
    "resolve_algorithm",
    "time_step",
    "validate_hotp",
]
