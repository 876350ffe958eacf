"""Inventory adjustment — deduct stock across locations and push it to the provider.

``adjust_inventory()`` is the entry point:

1. Commit a pending ledger row keyed by the idempotency token. If the token
   is already taken, the request is a replay (``alreadyProcessed``) or a
   duplicate of one still in flight (409).
2. Run the ``AdjustInventory`` command: provider calls, then the local
   location map and the ledger row flip to ``applied`` in one unit of work.
3. On any failure, drop the pending row so the key can be retried.
"""

from protean import UnitOfWork, handle
from protean.exceptions import ObjectNotFoundError, TransactionError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import CatalogSource, Product
from storefront.domain import logger, storefront
from storefront.errors import (
    AdjustmentInProgressError,
    NotFoundError,
    ProviderLinkError,
    StateConflictError,
    UpstreamError,
)
from storefront.inventory.allocation import first_fit
from storefront.inventory.ledger import InventoryAdjustmentRecord, adjustment_token, claim, find_record, release
from storefront.inventory.provider import get_inventory_provider
from storefront.inventory.provider.port import AdjustmentReason, ProviderConnection


@storefront.command(part_of="InventoryAdjustmentRecord")
class AdjustInventory:
    workspace_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    reason = String(required=True, choices=AdjustmentReason)
    idempotency_key = String(required=True, max_length=255)


def _load_product(workspace_id, product_id) -> Product:
    try:
        product = current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise NotFoundError("Product not found") from None

    if str(product.workspace_id) != str(workspace_id):
        raise NotFoundError("Product not found")
    return product


def _load_source(product: Product) -> CatalogSource:
    if not product.is_provider_linked:
        raise ProviderLinkError("Product not linked to Shopify")

    try:
        source = current_domain.repository_for(CatalogSource).get(str(product.catalog_source_id))
    except ObjectNotFoundError:
        raise ProviderLinkError("Catalog source not found") from None

    if str(source.workspace_id) != str(product.workspace_id):
        raise ProviderLinkError("Catalog source not found")
    return source


@storefront.command_handler(part_of=InventoryAdjustmentRecord)
class InventoryAdjustmentHandler:
    @handle(AdjustInventory)
    def adjust(self, command):
        record = find_record(command.workspace_id, command.product_id, command.idempotency_key)
        if record is None:
            record = InventoryAdjustmentRecord.open(
                workspace_id=str(command.workspace_id),
                product_id=str(command.product_id),
                idempotency_key=command.idempotency_key,
                reason=command.reason,
                quantity=command.quantity,
            )
        elif record.is_applied:
            return {"success": True, "alreadyProcessed": True}

        product = _load_product(command.workspace_id, command.product_id)
        source = _load_source(product)

        quantities = product.location_quantities()
        if not quantities:
            raise StateConflictError("No inventory locations found")

        plan = first_fit(quantities, command.quantity)
        if plan.shortage:
            logger.warning(
                "inventory_shortage",
                product_id=str(product.id),
                requested=command.quantity,
                allocated=plan.allocated,
                shortage=plan.shortage,
            )

        reason = AdjustmentReason(command.reason)
        connection = ProviderConnection(shop_domain=source.shop_domain, access_token=source.access_token)
        provider = get_inventory_provider()
        applied = []
        for deduction in plan.deductions:
            try:
                provider.set_on_hand(
                    connection,
                    inventory_item_id=product.shopify_inventory_item_id,
                    location_id=deduction.location_id,
                    quantity=deduction.new_quantity,
                    reason=reason,
                )
            except UpstreamError:
                logger.error(
                    "inventory_provider_update_failed",
                    product_id=str(product.id),
                    location_id=deduction.location_id,
                    applied_locations=applied,
                )
                raise
            applied.append(deduction.location_id)

        adjustments = [
            {"locationId": d.location_id, "newQuantity": d.new_quantity, "deducted": d.deducted}
            for d in plan.deductions
        ]
        before_state = product.inventory_by_location
        product.set_location_quantities({d.location_id: d.new_quantity for d in plan.deductions})
        record.mark_applied(
            before_state=before_state,
            after_state=product.inventory_by_location,
            adjustments=adjustments,
            remaining_shortage=plan.shortage,
        )
        current_domain.repository_for(Product).add(product)
        current_domain.repository_for(InventoryAdjustmentRecord).add(record)

        logger.info(
            "inventory_adjusted",
            product_id=str(product.id),
            reason=reason.value,
            quantity=command.quantity,
            locations=len(adjustments),
            stock=product.stock,
        )
        return {
            "success": True,
            "adjustments": adjustments,
            "remainingShortage": plan.shortage,
        }


def _open_claim(command) -> InventoryAdjustmentRecord | None:
    """Commit a pending ledger row for the command's token.

    Returns the record that already holds the token, or ``None`` when this
    caller now owns it. The unique ``token`` makes the insert fail for every
    caller but one, whichever process it runs in.
    """
    record = InventoryAdjustmentRecord.open(
        workspace_id=str(command.workspace_id),
        product_id=str(command.product_id),
        idempotency_key=command.idempotency_key,
        reason=command.reason,
        quantity=command.quantity,
    )
    try:
        with UnitOfWork():
            current_domain.repository_for(InventoryAdjustmentRecord).add(record)
    except (ValidationError, TransactionError):
        existing = find_record(command.workspace_id, command.product_id, command.idempotency_key)
        if existing is None:
            raise
        return existing
    return None


def _replay(command, record: InventoryAdjustmentRecord) -> dict:
    if not record.is_applied:
        raise AdjustmentInProgressError()

    logger.info(
        "inventory_adjustment_already_processed",
        product_id=str(command.product_id),
        idempotency_key=command.idempotency_key,
    )
    return {"success": True, "alreadyProcessed": True}


def adjust_inventory(workspace_id, product_id, quantity, reason, idempotency_key) -> dict:
    command = AdjustInventory(
        workspace_id=workspace_id,
        product_id=product_id,
        quantity=quantity,
        reason=reason,
        idempotency_key=idempotency_key,
    )
    token = adjustment_token(command.workspace_id, command.product_id, command.idempotency_key)

    with claim(token):
        existing = find_record(command.workspace_id, command.product_id, command.idempotency_key)
        if existing is None:
            existing = _open_claim(command)
        if existing is not None:
            return _replay(command, existing)

        try:
            return current_domain.process(command, asynchronous=False)
        except Exception:
            release(command.workspace_id, command.product_id, command.idempotency_key)
            raise
