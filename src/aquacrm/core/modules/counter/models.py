"""Auto-incrementing counters for sequential document numbering."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

SEQUENCE_WIDTH = 3


class CounterType(StrEnum):
    """Document types that use sequential numbering."""

    AMC = "amc"
    INVOICE = "invoice"
    QUOTATION = "quotation"


class Counter(BaseModel):
    """Atomic counter for sequential numbers per document type.

    Stored as {"_id": <document type>, "seq": <int>}, one document per type.
    Created lazily on first allocation, never reset or deleted.
    """

    name: str = Field(alias="_id")
    seq: int = 0  # Current value; next number will be seq + 1

    model_config = ConfigDict(populate_by_name=True)


def format_sequence(value: int) -> str:
    """Zero-pad a sequence value to at least three digits (7 -> "007", 1042 -> "1042")."""
    return str(value).zfill(SEQUENCE_WIDTH)
