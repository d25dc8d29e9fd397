from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from aquacrm.core.db import MongoModel
from aquacrm.core.modules.client.models import ClientInfo
from aquacrm.utils import now, round_money


class QuotationStatus(StrEnum):
    DRAFT = "Draft"
    SENT = "Sent"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class LineItem(BaseModel):
    """Priced line of a quotation or invoice."""

    product_id: UUID | None = None
    product_name: str | None = None
    description: str | None = None
    quantity: float = Field(1, gt=0)
    price: float = Field(..., ge=0)

    @property
    def amount(self) -> float:
        return self.quantity * self.price


class CommercialTerm(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class QuotationContent(BaseModel):
    """Editable part of a quotation, archived whole on every edit."""

    client_info: ClientInfo
    line_items: list[LineItem] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    total_amount: float = 0
    tax_percentage: float = 0
    grand_total: float = 0
    valid_until: date | None = None
    commercial_terms: list[CommercialTerm] = Field(default_factory=list)


class QuotationVersion(QuotationContent):
    """Snapshot of a quotation as it was before an edit."""

    version: int
    updated_at: datetime = Field(default_factory=now)
    reason: str


class Quotation(MongoModel, QuotationContent):
    """Price offer for a client or a not-yet-registered lead."""

    quotation_id: str  # Human-readable, e.g. QUO-20250314-007-K3ZQ
    client_id: UUID | None = None  # Empty while the quotation is for a lead
    status: QuotationStatus = QuotationStatus.DRAFT
    edit_history: list[QuotationVersion] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def snapshot(self, reason: str) -> QuotationVersion:
        """Archive the current content as the next version."""
        content = self.model_dump(include=set(QuotationContent.model_fields))
        return QuotationVersion(version=len(self.edit_history) + 1, reason=reason, **content)


class LineItemInput(BaseModel):
    """Line item referencing a catalog product; price and description default from the product."""

    product_id: UUID
    quantity: float = Field(1, gt=0)
    price: float | None = Field(None, ge=0)
    description: str | None = None


class QuotationCreate(BaseModel):
    client_id: UUID | None = None
    client_info: ClientInfo | None = None
    line_items: list[LineItemInput] = Field(..., min_length=1)
    image_urls: list[str] = Field(default_factory=list)
    tax_percentage: float = Field(0, ge=0)
    valid_until: date | None = None
    commercial_terms: list[CommercialTerm] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_client(self) -> "QuotationCreate":
        if self.client_id is None and self.client_info is None:
            raise ValueError("Either client_id or client_info must be provided")
        return self


class QuotationUpdate(BaseModel):
    """Revision of a quotation's content.

    line_items, commercial_terms and valid_until replace the stored values, so an
    omitted valid_until clears it. image_urls and tax_percentage keep the stored
    value when omitted.
    """

    reason: str = Field(..., min_length=1, description="Why the quotation was revised")
    line_items: list[LineItemInput] = Field(..., min_length=1)
    image_urls: list[str] | None = None
    tax_percentage: float | None = Field(None, ge=0)
    valid_until: date | None = None
    commercial_terms: list[CommercialTerm] = Field(default_factory=list)


def calculate_totals(line_items: list[LineItem], tax_percentage: float) -> tuple[float, float]:
    """Return (total_amount, grand_total) for the given line items and tax rate."""
    total = round_money(sum(item.amount for item in line_items))
    grand_total = round_money(total * (1 + tax_percentage / 100))
    return total, grand_total
