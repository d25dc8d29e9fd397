from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from aquacrm.core.db import MongoModel
from aquacrm.core.modules.client.models import ClientInfo
from aquacrm.utils import now

MAX_FREQUENCY_PER_YEAR = 12


class VisitStatus(StrEnum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class AMCStatus(StrEnum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"


class ServiceVisit(BaseModel):
    """One scheduled maintenance visit of a contract."""

    scheduled_date: date
    completed_date: date | None = None
    status: VisitStatus = VisitStatus.SCHEDULED
    notes: str | None = None

    def with_status(self, status: VisitStatus, completed_date: date | None, today: date) -> "ServiceVisit":
        """Return a copy in the given status.

        Completing a visit records completed_date (today when not given), any
        other status clears it.
        """
        if status == VisitStatus.COMPLETED:
            return self.model_copy(update={"status": status, "completed_date": completed_date or today})
        return self.model_copy(update={"status": status, "completed_date": None})


class ProductInstance(BaseModel):
    """Installed unit covered by a contract."""

    product_id: UUID
    product_name: str | None = None
    serial_number: str | None = None
    purchase_date: date | None = None


class AMC(MongoModel):
    """Annual maintenance contract with its service visit schedule."""

    amc_id: str  # Human-readable, e.g. AMC-20250314-042-7QXD
    client_id: UUID
    client_info: ClientInfo
    product_instances: list[ProductInstance] = Field(default_factory=list)
    start_date: date
    end_date: date
    contract_amount: float = Field(..., ge=0)
    frequency_per_year: int = Field(..., ge=1, le=MAX_FREQUENCY_PER_YEAR)
    service_visits: list[ServiceVisit] = Field(default_factory=list)
    status: AMCStatus = AMCStatus.ACTIVE
    originating_invoice_id: UUID | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class ProductInstanceInput(BaseModel):
    product_id: UUID
    serial_number: str | None = None
    purchase_date: date | None = None


class AMCCreate(BaseModel):
    client_id: UUID
    product_instances: list[ProductInstanceInput] = Field(default_factory=list)
    start_date: date
    end_date: date
    contract_amount: float = Field(..., ge=0)
    frequency_per_year: int = Field(..., ge=1, le=MAX_FREQUENCY_PER_YEAR)
    originating_invoice_id: UUID | None = None
    billing_address: str | None = None
    installation_address: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "AMCCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AMCUpdate(BaseModel):
    """Partial contract update.

    Omitted and null fields leave the stored value unchanged. Changing dates or
    frequency regenerates the visit schedule.
    """

    start_date: date | None = None
    end_date: date | None = None
    contract_amount: float | None = Field(None, ge=0)
    frequency_per_year: int | None = Field(None, ge=1, le=MAX_FREQUENCY_PER_YEAR)
    status: AMCStatus | None = None
    product_instances: list[ProductInstanceInput] | None = None


class VisitStatusUpdate(BaseModel):
    status: VisitStatus
    completed_date: date | None = None
    notes: str | None = None
