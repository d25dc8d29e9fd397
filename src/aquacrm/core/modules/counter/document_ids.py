"""Human-readable document identifiers built around allocated sequence tokens."""

import secrets
import string
from datetime import datetime

SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 4


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def amc_id(sequence: str, when: datetime, suffix: str | None = None) -> str:
    """AMC-YYYYMMDD-<sequence>-<suffix>"""
    return f"AMC-{when:%Y%m%d}-{sequence}-{suffix or random_suffix()}"


def quotation_id(sequence: str, when: datetime, suffix: str | None = None) -> str:
    """QUO-YYYYMMDD-<sequence>-<suffix>"""
    return f"QUO-{when:%Y%m%d}-{sequence}-{suffix or random_suffix()}"


def invoice_id(sequence: str, when: datetime) -> str:
    """INV-YYYY-<sequence>"""
    return f"INV-{when:%Y}-{sequence}"
