"""Tests for client snapshots and contact matching."""

from aquacrm.core.modules.client.models import Client, ClientInfo, contact_conditions


class TestClientInfoFromClient:
    def test_picks_tagged_addresses(self, mock_client):
        info = ClientInfo.from_client(mock_client)

        assert info.name == "Ravi Kumar"
        assert info.phone == "+91 98450 12345"
        assert info.billing_address == "12 MG Road, Bengaluru"
        assert info.installation_address == "Plot 7, Whitefield, Bengaluru"

    def test_explicit_addresses_win(self, mock_client):
        info = ClientInfo.from_client(mock_client, installation_address="Site office, Hosur")
        assert info.installation_address == "Site office, Hosur"
        assert info.billing_address == "12 MG Road, Bengaluru"

    def test_falls_back_to_first_address(self, mock_client):
        mock_client.addresses = mock_client.addresses[1:]
        assert ClientInfo.from_client(mock_client).billing_address == "Plot 7, Whitefield, Bengaluru"

    def test_client_without_addresses(self):
        info = ClientInfo.from_client(Client(name="Cash customer"))
        assert info.billing_address is None
        assert info.installation_address is None


class TestContactConditions:
    def test_phone_and_email(self):
        assert contact_conditions("98450", "a@b.c") == [{"phone": "98450"}, {"email": "a@b.c"}]

    def test_ignores_blank_values(self):
        assert contact_conditions("  ", None) == []
        assert contact_conditions(None, "a@b.c") == [{"email": "a@b.c"}]

    def test_strips_whitespace(self):
        assert contact_conditions(" 98450 ", None) == [{"phone": "98450"}]
