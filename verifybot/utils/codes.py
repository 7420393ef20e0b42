"""One-time password and access-code generation."""

import secrets
import string
from typing import List

OTP_MIN = 100000
OTP_MAX = 999999

RESOURCE_CODE_PREFIX = "REDM-"
RESOURCE_CODE_LENGTH = 6
RESOURCE_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_otp() -> str:
    """
    Generate a 6-digit one-time password.

    Uniform over 100000..999999, so the result never has a leading zero.

    Returns:
        OTP as a string of 6 ASCII digits
    """
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def generate_resource_code() -> str:
    """Generate a redemption code such as ``REDM-7QK2ZD``."""
    suffix = "".join(secrets.choice(RESOURCE_CODE_ALPHABET) for _ in range(RESOURCE_CODE_LENGTH))
    return f"{RESOURCE_CODE_PREFIX}{suffix}"


def generate_resource_codes(count: int) -> List[str]:
    """
    Generate a batch of redemption codes.

    Codes are not checked for uniqueness within the batch.

    Args:
        count: Number of codes to generate

    Returns:
        List of ``count`` codes
    """
    return [generate_resource_code() for _ in range(count)]
