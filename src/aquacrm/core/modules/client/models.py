from datetime import datetime

from pydantic import BaseModel, Field

from aquacrm.core.db import MongoModel
from aquacrm.utils import now


class Address(BaseModel):
    """Tagged client address, e.g. tag="Installation"."""

    tag: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class CustomField(BaseModel):
    key: str
    value: str


class Client(MongoModel):
    """Customer record. Phone and email are unique across clients when set."""

    name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    addresses: list[Address] = Field(default_factory=list)
    custom_fields: list[CustomField] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def find_address(self, tag: str) -> str | None:
        """Address with the given tag (case-insensitive), falling back to the first address."""
        for item in self.addresses:
            if item.tag.lower() == tag.lower():
                return item.address
        return self.addresses[0].address if self.addresses else None


class ClientInfo(BaseModel):
    """Snapshot of client contact details embedded in quotations, invoices and AMCs."""

    name: str = Field(..., min_length=1)
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    billing_address: str | None = None
    installation_address: str | None = None

    @classmethod
    def from_client(
        cls, client: Client, billing_address: str | None = None, installation_address: str | None = None
    ) -> "ClientInfo":
        return cls(
            name=client.name,
            contact_person=client.contact_person,
            phone=client.phone,
            email=client.email,
            billing_address=billing_address or client.find_address("billing"),
            installation_address=installation_address or client.find_address("installation"),
        )


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    addresses: list[Address] = Field(default_factory=list)
    custom_fields: list[CustomField] = Field(default_factory=list)


class ClientUpdate(BaseModel):
    """Partial client update; omitted and null fields leave the stored value unchanged."""

    name: str | None = Field(None, min_length=1)
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    addresses: list[Address] | None = None
    custom_fields: list[CustomField] | None = None


def contact_conditions(phone: str | None, email: str | None) -> list[dict[str, str]]:
    """Mongo $or conditions matching clients by phone or email, ignoring blank values."""
    conditions = []
    if phone and phone.strip():
        conditions.append({"phone": phone.strip()})
    if email and email.strip():
        conditions.append({"email": email.strip()})
    return conditions

