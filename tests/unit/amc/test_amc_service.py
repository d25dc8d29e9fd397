"""Tests for contract updates and visit status changes."""

import asyncio
import copy
from datetime import date
from uuid import uuid4

import pytest

from aquacrm.core.modules.amc.models import AMCStatus, AMCUpdate, VisitStatus, VisitStatusUpdate
from aquacrm.errors import NotFoundError, ValidationError


def stored_visits(documents, amc):
    return [(visit["scheduled_date"], visit["status"]) for visit in documents.docs[amc.id]["service_visits"]]


class TestUpdateAMC:
    def test_frequency_change_persists_new_schedule(self, amc_service, documents, stored_amc):
        result = asyncio.run(amc_service.update_amc(stored_amc.id, AMCUpdate(frequency_per_year=2)))

        expected = [(date(2025, 1, 1), VisitStatus.SCHEDULED), (date(2025, 12, 31), VisitStatus.SCHEDULED)]
        assert [(v.scheduled_date, v.status) for v in result.service_visits] == expected
        assert stored_visits(documents, stored_amc) == expected
        assert documents.docs[stored_amc.id]["frequency_per_year"] == 2

    def test_date_change_discards_completed_visits(self, amc_service, documents, stored_amc):
        result = asyncio.run(amc_service.update_amc(stored_amc.id, AMCUpdate(end_date=date(2026, 6, 30))))

        assert len(result.service_visits) == 4
        assert result.service_visits[0].scheduled_date == date(2025, 1, 1)
        assert result.service_visits[-1].scheduled_date == date(2026, 6, 30)
        assert all(visit.status == VisitStatus.SCHEDULED for visit in result.service_visits)
        assert all(visit.completed_date is None for visit in result.service_visits)
        assert len(stored_visits(documents, stored_amc)) == 4

    def test_inverted_dates_rejected(self, amc_service, documents, stored_amc):
        before = copy.deepcopy(documents.docs[stored_amc.id])
        with pytest.raises(ValidationError, match="end_date must not be before start_date"):
            asyncio.run(amc_service.update_amc(stored_amc.id, AMCUpdate(start_date=date(2026, 1, 1))))
        assert documents.docs[stored_amc.id] == before

    def test_unchanged_schedule_keeps_visits(self, amc_service, documents, stored_amc):
        before = stored_visits(documents, stored_amc)
        result = asyncio.run(amc_service.update_amc(stored_amc.id, AMCUpdate(contract_amount=5000)))

        assert result.contract_amount == 5000
        assert result.service_visits == stored_amc.service_visits
        assert stored_visits(documents, stored_amc) == before

    def test_same_frequency_keeps_visits(self, amc_service, stored_amc):
        result = asyncio.run(amc_service.update_amc(stored_amc.id, AMCUpdate(frequency_per_year=4)))
        assert result.service_visits == stored_amc.service_visits

    def test_null_fields_leave_contract_unchanged(self, amc_service, documents, stored_amc):
        data = AMCUpdate.model_validate(
            {"frequency_per_year": None, "start_date": None, "end_date": None, "contract_amount": None, "status": None}
        )
        result = asyncio.run(amc_service.update_amc(stored_amc.id, data))

        stored = documents.docs[stored_amc.id]
        assert stored["frequency_per_year"] == 4
        assert stored["start_date"] == date(2025, 1, 1)
        assert stored["end_date"] == date(2025, 12, 31)
        assert stored["contract_amount"] == 4500
        assert stored["status"] == AMCStatus.ACTIVE
        assert result.service_visits == stored_amc.service_visits

    def test_missing_contract(self, amc_service):
        with pytest.raises(NotFoundError):
            asyncio.run(amc_service.update_amc(uuid4(), AMCUpdate(contract_amount=1)))


class TestUpdateVisitStatus:
    def test_complete_visit(self, amc_service, documents, stored_amc):
        update = VisitStatusUpdate(status=VisitStatus.COMPLETED, completed_date=date(2025, 9, 2), notes="Filter replaced")
        result = asyncio.run(amc_service.update_visit_status(stored_amc.id, 2, update))

        visit = result.service_visits[2]
        assert visit.status == VisitStatus.COMPLETED
        assert visit.completed_date == date(2025, 9, 2)
        assert visit.notes == "Filter replaced"
        assert documents.docs[stored_amc.id]["service_visits"][2]["status"] == VisitStatus.COMPLETED
        assert result.service_visits[3] == stored_amc.service_visits[3]

    def test_reopen_clears_completed_date(self, amc_service, stored_amc):
        update = VisitStatusUpdate(status=VisitStatus.SCHEDULED)
        result = asyncio.run(amc_service.update_visit_status(stored_amc.id, 0, update))

        assert result.service_visits[0].status == VisitStatus.SCHEDULED
        assert result.service_visits[0].completed_date is None

    @pytest.mark.parametrize("index", [4, 10, -1])
    def test_index_out_of_range(self, amc_service, documents, stored_amc, index):
        before = copy.deepcopy(documents.docs[stored_amc.id])
        with pytest.raises(NotFoundError, match="Service visit not found"):
            asyncio.run(amc_service.update_visit_status(stored_amc.id, index, VisitStatusUpdate(status=VisitStatus.CANCELLED)))
        assert documents.docs[stored_amc.id] == before
