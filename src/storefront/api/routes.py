"""FastAPI routes for the agent's tool calls — cart, checkout, inventory, lookup."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import require_tool_credentials
from storefront.api.schemas import (
    AddToCartRequest,
    AddToCartResponse,
    AdjustInventoryRequest,
    AdjustInventoryResponse,
    BrowseCatalogRequest,
    CheckoutResponse,
    ConversationRequest,
    OrderStatusRequest,
    OrderStatusResponse,
    ProductListResponse,
    RemoveFromCartRequest,
    RemoveFromCartResponse,
    SearchProductsRequest,
    VectorSearchRequest,
    ViewCartResponse,
)
from storefront.cart.items import AddToCart, RemoveFromCart, process_cart_command
from storefront.cart.view import view_cart
from storefront.catalogue.lookup import browse_catalog, search_products, vector_search_products
from storefront.inventory.adjustment import adjust_inventory
from storefront.ordering.checkout import Checkout
from storefront.ordering.status import check_order_status
from storefront.utils.logging import bind_tool_call

router = APIRouter(tags=["tools"], dependencies=[Depends(require_tool_credentials)])


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@router.post("/add-to-cart", response_model=AddToCartResponse)
async def add_to_cart(body: AddToCartRequest) -> AddToCartResponse:
    bind_tool_call("add-to-cart", body.workspace_id, conversation_id=body.conversation_id, product_id=body.product_id)
    command = AddToCart(
        workspace_id=body.workspace_id,
        conversation_id=body.conversation_id,
        product_id=body.product_id,
        quantity=body.quantity or 1,
        variant_info=body.variant_info,
        expected_cart_version=body.cart_version,
    )
    result = process_cart_command(command)
    return AddToCartResponse(**result)


@router.post("/remove-from-cart", response_model=RemoveFromCartResponse)
async def remove_from_cart(body: RemoveFromCartRequest) -> RemoveFromCartResponse:
    bind_tool_call(
        "remove-from-cart", body.workspace_id, conversation_id=body.conversation_id, product_id=body.product_id
    )
    command = RemoveFromCart(
        workspace_id=body.workspace_id,
        conversation_id=body.conversation_id,
        product_id=body.product_id,
        expected_cart_version=body.cart_version,
    )
    result = process_cart_command(command)
    return RemoveFromCartResponse(**result)


@router.post("/view-cart", response_model=ViewCartResponse)
async def view_cart_items(body: ConversationRequest) -> ViewCartResponse:
    bind_tool_call("view-cart", body.workspace_id, conversation_id=body.conversation_id)
    return ViewCartResponse(**view_cart(body.workspace_id, body.conversation_id))


# ---------------------------------------------------------------------------
# Checkout & orders
# ---------------------------------------------------------------------------
@router.post("/create-checkout", response_model=CheckoutResponse)
async def create_checkout(body: ConversationRequest) -> CheckoutResponse:
    bind_tool_call("create-checkout", body.workspace_id, conversation_id=body.conversation_id)
    command = Checkout(workspace_id=body.workspace_id, conversation_id=body.conversation_id)
    result = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(**result)


@router.post("/check-order-status", response_model=OrderStatusResponse)
async def order_status(body: OrderStatusRequest) -> OrderStatusResponse:
    bind_tool_call("check-order-status", body.workspace_id, conversation_id=body.conversation_id)
    summary = check_order_status(body.workspace_id, body.conversation_id, order_number=body.order_number)
    return OrderStatusResponse(**summary)


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
@router.post(
    "/shopify-adjust-inventory",
    response_model=AdjustInventoryResponse,
    response_model_exclude_none=True,
)
async def shopify_adjust_inventory(body: AdjustInventoryRequest) -> AdjustInventoryResponse:
    bind_tool_call("shopify-adjust-inventory", body.workspace_id, product_id=body.product_id)
    result = adjust_inventory(
        workspace_id=body.workspace_id,
        product_id=body.product_id,
        quantity=body.quantity,
        reason=body.reason,
        idempotency_key=body.idempotency_key,
    )
    return AdjustInventoryResponse(**result)


# ---------------------------------------------------------------------------
# Product lookup
# ---------------------------------------------------------------------------
@router.post("/search-products", response_model=ProductListResponse)
async def search(body: SearchProductsRequest) -> ProductListResponse:
    bind_tool_call("search-products", body.workspace_id)
    products = search_products(
        body.workspace_id,
        body.query or "",
        category=body.category,
        max_price=body.max_price,
    )
    return ProductListResponse(products=products)


@router.post("/browse-catalog", response_model=ProductListResponse)
async def browse(body: BrowseCatalogRequest) -> ProductListResponse:
    bind_tool_call("browse-catalog", body.workspace_id)
    return ProductListResponse(products=browse_catalog(body.workspace_id, limit=body.limit))


@router.post("/vector-search-products", response_model=ProductListResponse)
async def vector_search(body: VectorSearchRequest) -> ProductListResponse:
    bind_tool_call("vector-search-products", body.workspace_id)
    products = vector_search_products(
        body.workspace_id,
        body.embedding,
        match_threshold=body.match_threshold,
        match_count=body.match_count,
        category=body.category,
        max_price=body.max_price,
        search_type=body.search_type,
        search_query=body.search_query,
    )
    return ProductListResponse(products=products)
