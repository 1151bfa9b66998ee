from typing import Union

from app.contracts.game import GameServices, Recipient
from app.logging_config import get_logger
from app.schemas.app_schemas import (
    ItemDeliveryRequest,
    ItemGrantedByFallbackDrop,
    ItemGrantedDirectly,
    Rejected,
    RejectionReason,
)


logger = get_logger(__name__)

DeliveryOutcome = Union[ItemGrantedDirectly, ItemGrantedByFallbackDrop, Rejected]


def deliver(request: ItemDeliveryRequest, recipient: Recipient, services: GameServices) -> DeliveryOutcome:
    """
    Create the item and hand it to the recipient, dropping it next to them
    when the inventory will not take it. Called once per record, never retried.
    """
    handle = services.catalog.instantiate(request.definition, request.quantity)
    if handle is None:
        return Rejected(
            reason=RejectionReason.CREATION_FAILED,
            item_name=request.item_name,
            quantity=request.quantity,
        )

    if services.inventory.try_place(handle):
        logger.info(
            "Placed item=%s quantity=%s in inventory of recipient=%s",
            request.item_name,
            request.quantity,
            recipient.id,
        )
        return ItemGrantedDirectly(
            item_name=request.item_name,
            quantity=request.quantity,
            recipient=recipient.display_name,
        )

    # the stack already exists, so it has to end up in the world
    services.world.drop_near(handle, recipient)
    logger.info(
        "Inventory full, dropped item=%s quantity=%s near recipient=%s",
        request.item_name,
        request.quantity,
        recipient.id,
    )
    return ItemGrantedByFallbackDrop(
        item_name=request.item_name,
        quantity=request.quantity,
        recipient=recipient.display_name,
    )
