from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from aquacrm.core.db import MongoModel
from aquacrm.core.modules.client.models import ClientInfo
from aquacrm.core.modules.quotation.models import CommercialTerm, LineItem
from aquacrm.errors import ValidationError
from aquacrm.utils import now, round_money, today


class InvoiceStatus(StrEnum):
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"


class Invoice(MongoModel):
    """Bill issued from an approved quotation or a maintenance contract."""

    invoice_id: str  # Human-readable, e.g. INV-2025-014
    client_id: UUID
    client_info: ClientInfo
    quotation_id: UUID | None = None
    amc_id: UUID | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    issue_date: date = Field(default_factory=today)
    due_date: date | None = None
    installation_date: date | None = None
    line_items: list[LineItem] = Field(default_factory=list)
    total_amount: float = 0
    amount_paid: float = 0
    payment_date: date | None = None
    terms_of_service: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance_due(self) -> float:
        return round_money(self.total_amount - self.amount_paid)

    def is_overdue(self, on: date) -> bool:
        """Unsettled and past its due date."""
        if self.status in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED) or self.due_date is None:
            return False
        return self.due_date < on


class InvoiceFromQuotation(BaseModel):
    quotation_id: UUID
    due_date: date | None = None
    installation_date: date | None = None


class InvoiceFromAMC(BaseModel):
    amc_id: UUID
    due_date: date | None = None


class PaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    payment_date: date | None = None


def terms_of_service(terms: list[CommercialTerm]) -> str | None:
    """Flatten commercial terms into "title:\\ncontent" blocks separated by blank lines."""
    if not terms:
        return None
    return "\n\n".join(f"{term.title}:\n{term.content}" for term in terms)


def apply_payment(invoice: Invoice, payment: PaymentCreate, on: date) -> dict[str, object]:
    """Field changes for recording a payment; settles the invoice once fully paid."""
    if invoice.status == InvoiceStatus.CANCELLED:
        raise ValidationError("Cannot record a payment on a cancelled invoice")
    if invoice.status == InvoiceStatus.PAID:
        raise ValidationError("Invoice is already paid")

    amount_paid = round_money(invoice.amount_paid + payment.amount)
    changes: dict[str, object] = {"amount_paid": amount_paid}
    if amount_paid >= invoice.total_amount:
        changes["status"] = InvoiceStatus.PAID
        changes["payment_date"] = payment.payment_date or on
    return changes
