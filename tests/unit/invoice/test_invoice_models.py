"""Tests for invoice payments, terms and overdue detection."""

from datetime import date
from uuid import UUID

import pytest

from aquacrm.core.modules.client.models import ClientInfo
from aquacrm.core.modules.invoice.models import Invoice, InvoiceStatus, PaymentCreate, apply_payment, terms_of_service
from aquacrm.core.modules.quotation.models import CommercialTerm
from aquacrm.errors import ValidationError

TODAY = date(2025, 6, 15)


@pytest.fixture
def invoice():
    return Invoice(
        invoice_id="INV-2025-014",
        client_id=UUID("12345678-1234-5678-1234-567812345678"),
        client_info=ClientInfo(name="Ravi Kumar"),
        status=InvoiceStatus.SENT,
        issue_date=date(2025, 6, 1),
        due_date=date(2025, 6, 10),
        total_amount=10000,
    )


class TestApplyPayment:
    def test_partial_payment(self, invoice):
        changes = apply_payment(invoice, PaymentCreate(amount=4000), TODAY)
        assert changes == {"amount_paid": 4000}

    def test_full_payment_settles_invoice(self, invoice):
        changes = apply_payment(invoice, PaymentCreate(amount=10000, payment_date=date(2025, 6, 12)), TODAY)

        assert changes["status"] == InvoiceStatus.PAID
        assert changes["payment_date"] == date(2025, 6, 12)

    def test_payment_date_defaults_to_today(self, invoice):
        invoice.amount_paid = 6000
        changes = apply_payment(invoice, PaymentCreate(amount=4000), TODAY)

        assert changes["amount_paid"] == 10000
        assert changes["payment_date"] == TODAY

    def test_overpayment_settles_invoice(self, invoice):
        assert apply_payment(invoice, PaymentCreate(amount=12000), TODAY)["status"] == InvoiceStatus.PAID

    def test_rejects_cancelled_invoice(self, invoice):
        invoice.status = InvoiceStatus.CANCELLED
        with pytest.raises(ValidationError, match="cancelled"):
            apply_payment(invoice, PaymentCreate(amount=100), TODAY)

    def test_rejects_paid_invoice(self, invoice):
        invoice.status = InvoiceStatus.PAID
        with pytest.raises(ValidationError, match="already paid"):
            apply_payment(invoice, PaymentCreate(amount=100), TODAY)


class TestInvoice:
    def test_balance_due(self, invoice):
        invoice.amount_paid = 2500.5
        assert invoice.balance_due == 7499.5

    def test_balance_due_is_serialized_but_not_stored(self, invoice):
        assert invoice.model_dump()["balance_due"] == 10000
        assert "balance_due" not in invoice.to_mongo()

    def test_stored_document_uses_mongo_id(self, invoice):
        doc = invoice.to_mongo()
        assert doc["_id"] == invoice.id
        assert "id" not in doc

    def test_overdue_when_past_due(self, invoice):
        assert invoice.is_overdue(TODAY)

    def test_not_overdue_on_due_date(self, invoice):
        assert not invoice.is_overdue(date(2025, 6, 10))

    @pytest.mark.parametrize("status", [InvoiceStatus.PAID, InvoiceStatus.CANCELLED])
    def test_settled_invoice_never_overdue(self, invoice, status):
        invoice.status = status
        assert not invoice.is_overdue(TODAY)

    def test_no_due_date_never_overdue(self, invoice):
        invoice.due_date = None
        assert not invoice.is_overdue(TODAY)


class TestTermsOfService:
    def test_joins_terms(self):
        terms = [
            CommercialTerm(title="Warranty", content="One year on parts"),
            CommercialTerm(title="Payment", content="50% advance"),
        ]
        assert terms_of_service(terms) == "Warranty:\nOne year on parts\n\nPayment:\n50% advance"

    def test_no_terms(self):
        assert terms_of_service([]) is None
