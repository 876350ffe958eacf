"""Pydantic request/response schemas for the tool endpoints.

These are external contracts — separate from internal Protean commands. Key
names follow what the agent already sends: ids in camelCase, the rest in
snake_case. Either the alias or the field name is accepted.
"""

from pydantic import BaseModel, ConfigDict, Field


class ToolRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    workspace_id: str = Field(alias="workspaceId", min_length=1)


class ConversationRequest(ToolRequest):
    conversation_id: str = Field(alias="conversationId", min_length=1)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(ConversationRequest):
    product_id: str = Field(min_length=1)
    quantity: int | None = Field(default=None, ge=0)  # omitted or 0 means 1
    variant_info: str | None = None
    cart_version: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "workspaceId": "ws-001",
                    "conversationId": "conv-001",
                    "product_id": "prod-001",
                    "quantity": 2,
                    "variant_info": "Size M",
                    "cart_version": 3,
                }
            ]
        },
    )


class RemoveFromCartRequest(ConversationRequest):
    product_id: str = Field(min_length=1)
    cart_version: int | None = Field(default=None, ge=0)


class CartItemSchema(BaseModel):
    product_id: str
    title: str
    price: float
    quantity: int
    variant_info: str | None = None
    image_url: str | None = None
    added_at: str | None = None


class AddToCartResponse(BaseModel):
    success: bool = True
    cart_count: int
    cart_total: float
    added_item: CartItemSchema
    cart_version: int


class RemoveFromCartResponse(BaseModel):
    success: bool = True
    cart_count: int
    cart_total: float
    cart_version: int


class ViewCartResponse(BaseModel):
    items: list[CartItemSchema] = Field(default_factory=list)
    total: float = 0
    count: int = 0
    cart_version: int = 0


# ---------------------------------------------------------------------------
# Checkout & orders
# ---------------------------------------------------------------------------
class CheckoutResponse(BaseModel):
    success: bool = True
    order_number: str
    payment_link: str
    total: float


class OrderStatusRequest(ConversationRequest):
    order_number: str | None = None


class OrderStatusResponse(BaseModel):
    order_number: str
    status: str
    payment_status: str
    total: float
    tracking_number: str | None = None
    created_at: str | None = None


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
class AdjustInventoryRequest(ToolRequest):
    product_id: str = Field(alias="productId", min_length=1)
    quantity: int = Field(ge=1)
    reason: str
    idempotency_key: str = Field(alias="idempotencyKey", min_length=1)


class LocationAdjustment(BaseModel):
    locationId: str
    newQuantity: int
    deducted: int


class AdjustInventoryResponse(BaseModel):
    success: bool = True
    adjustments: list[LocationAdjustment] | None = None
    remainingShortage: int | None = None
    alreadyProcessed: bool | None = None


# ---------------------------------------------------------------------------
# Product lookup
# ---------------------------------------------------------------------------
class SearchProductsRequest(ToolRequest):
    query: str | None = None
    category: str | None = None
    max_price: float | None = Field(default=None, ge=0)


class BrowseCatalogRequest(ToolRequest):
    limit: int | None = Field(default=None, ge=1, le=50)


class VectorSearchRequest(ToolRequest):
    embedding: list[float]
    search_query: str | None = Field(default=None, alias="searchQuery")
    match_threshold: float = Field(default=0.7, alias="matchThreshold", ge=-1, le=1)
    match_count: int = Field(default=10, alias="matchCount", ge=1, le=100)
    category: str | None = None
    max_price: float | None = Field(default=None, alias="maxPrice", ge=0)
    search_type: str = Field(default="vector", alias="searchType")


class ProductSchema(BaseModel):
    id: str
    sku: str | None = None
    title: str
    description: str | None = None
    price: float
    stock: int
    category: str | None = None
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    similarity: float | None = None


class ProductListResponse(BaseModel):
    products: list[ProductSchema]
