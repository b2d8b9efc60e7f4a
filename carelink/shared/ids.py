"""Human-readable document identifiers.

Every record is keyed by ``PREFIX`` + the last six digits of the millisecond
clock + a zero-padded random suffix, e.g. ``PAT482913027`` or ``RX48291344``.
"""

import secrets
import time


def generate_id(prefix: str, random_digits: int = 2) -> str:
    """Generate a prefixed id with a timestamp and random suffix."""
    timestamp = str(int(time.time() * 1000))[-6:]
    suffix = f"{secrets.randbelow(10 ** random_digits):0{random_digits}d}"
    return f"{prefix}{timestamp}{suffix}"
