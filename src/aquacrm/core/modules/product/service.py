from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from aquacrm.core.core import Service
from aquacrm.core.modules.product.models import Product, ProductCreate, ProductType, ProductUpdate
from aquacrm.errors import NotFoundError, ValidationError
from aquacrm.utils import now

logger = structlog.get_logger(__name__)


class ProductService(Service):
    """Manages the product and service catalog."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("products")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Partial index: only documents with a string SKU take part in uniqueness
        await self._collection.create_index(
            [("sku", 1)], unique=True, partialFilterExpression={"sku": {"$type": "string"}}
        )
        await self._collection.create_index([("type", 1), ("created_at", -1)])

    async def list_products(self, product_type: ProductType | None = None) -> list[Product]:
        """Get catalog entries, newest first, optionally filtered by type."""
        query = {"type": product_type} if product_type else {}
        cursor = self._collection.find(query).sort("created_at", -1)
        return await Product.list_cursor(cursor)

    async def get_product(self, product_id: UUID) -> Product:
        doc = await self._collection.find_one({"_id": product_id})
        if not doc:
            raise NotFoundError(f"Product not found: {product_id}")
        return Product.model_validate(doc)

    async def create_product(self, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        try:
            await self._collection.insert_one(product.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError(f"Product with SKU '{data.sku}' already exists") from e
        logger.info("product_created", product_id=product.id, name=product.name)
        return product

    async def update_product(self, product_id: UUID, data: ProductUpdate) -> Product:
        await self.get_product(product_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        changes["updated_at"] = now()
        try:
            await self._collection.update_one({"_id": product_id}, {"$set": changes})
        except DuplicateKeyError as e:
            raise ValidationError(f"Product with SKU '{data.sku}' already exists") from e
        return await self.get_product(product_id)

    async def delete_product(self, product_id: UUID) -> Product:
        product = await self.get_product(product_id)
        await self._collection.delete_one({"_id": product_id})
        logger.info("product_deleted", product_id=product_id)
        return product
