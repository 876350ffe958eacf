"""Product and CatalogSource aggregates.

Products are synced into a workspace from the merchant's catalog provider
(Shopify) or created by hand. ``stock`` is the authoritative sellable count;
provider-linked products also keep a per-location breakdown that the
inventory adjuster writes back after pushing changes to the provider.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


class ProductStatus(Enum):
    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class CatalogProvider(Enum):
    SHOPIFY = "shopify"


@storefront.aggregate
class CatalogSource:
    """A workspace's connection to an external catalog provider."""

    workspace_id = Identifier(required=True)
    provider = String(choices=CatalogProvider, default=CatalogProvider.SHOPIFY.value)
    shop_domain = String(required=True, max_length=255)
    access_token = String(required=True, max_length=255)
    created_at = DateTime(default=lambda: datetime.now(UTC))


@storefront.aggregate
class Product:
    workspace_id = Identifier(required=True)
    sku = String(max_length=100)
    title = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    category = String(max_length=100)
    tags = Text()  # JSON array of strings
    image_url = String(max_length=1024)
    status = String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    embedding = Text()  # JSON array of floats
    catalog_source_id = Identifier()
    shopify_product_id = String(max_length=255)
    shopify_inventory_item_id = String(max_length=255)
    inventory_by_location = Text()  # JSON: {location_id: {"quantity": int}}
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def create(cls, workspace_id, title, price, stock=0, **fields):
        now = datetime.now(UTC)
        tags = fields.pop("tags", None)
        embedding = fields.pop("embedding", None)
        inventory_by_location = fields.pop("inventory_by_location", None)
        return cls(
            workspace_id=workspace_id,
            title=title,
            price=price,
            stock=stock,
            tags=json.dumps(tags) if tags is not None else None,
            embedding=json.dumps(embedding) if embedding is not None else None,
            inventory_by_location=json.dumps(inventory_by_location) if inventory_by_location is not None else None,
            created_at=now,
            updated_at=now,
            **fields,
        )

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def is_sellable(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value and (self.stock or 0) > 0

    @property
    def is_provider_linked(self) -> bool:
        return bool(self.shopify_inventory_item_id) and bool(self.catalog_source_id)

    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    def embedding_vector(self) -> list[float] | None:
        return json.loads(self.embedding) if self.embedding else None

    def location_quantities(self) -> dict[str, int]:
        """Per-location on-hand quantities, in stored order."""
        locations = json.loads(self.inventory_by_location) if self.inventory_by_location else {}
        return {str(location_id): int((data or {}).get("quantity") or 0) for location_id, data in locations.items()}

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "sku": self.sku,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "category": self.category,
            "image_url": self.image_url,
            "tags": self.tag_list(),
        }

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def set_location_quantities(self, quantities: dict[str, int]) -> None:
        """Replace the per-location breakdown and mirror the total into ``stock``."""
        locations = json.loads(self.inventory_by_location) if self.inventory_by_location else {}
        for location_id, quantity in quantities.items():
            entry = dict(locations.get(location_id) or {})
            entry["quantity"] = quantity
            locations[location_id] = entry

        self.inventory_by_location = json.dumps(locations)
        self.stock = sum(max(0, int((data or {}).get("quantity") or 0)) for data in locations.values())
        self.updated_at = datetime.now(UTC)
