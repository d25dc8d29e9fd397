"""Tests for partial product updates."""

import asyncio

from aquacrm.core.modules.product.models import ProductUpdate


class TestUpdateProduct:
    def test_null_fields_are_ignored(self, product_service, documents, mock_product):
        data = ProductUpdate.model_validate({"name": None, "price": None, "type": None})
        result = asyncio.run(product_service.update_product(mock_product.id, data))

        stored = documents.docs[mock_product.id]
        assert stored["name"] == "RO Purifier 12L"
        assert stored["price"] == 15000
        assert result.type == mock_product.type

    def test_price_change(self, product_service, documents, mock_product):
        result = asyncio.run(product_service.update_product(mock_product.id, ProductUpdate(price=14250)))

        assert result.price == 14250
        assert documents.docs[mock_product.id]["price"] == 14250
