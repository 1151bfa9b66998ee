from typing import Optional, Sequence, Union

from app.contracts.contracts import TransactionRecord
from app.contracts.game import ItemCatalog
from app.identifiers import parse_item_name
from app.schemas.app_schemas import InformationalMessage, ItemDeliveryRequest, Rejected, RejectionReason


def informational_outcome(records: Sequence[Optional[TransactionRecord]]) -> Optional[InformationalMessage]:
    """
    A response holding exactly one record with a message is a notice from the
    store, not a purchase. Nothing in such a batch is delivered.
    """
    if len(records) != 1:
        return None
    record = records[0]
    if record is None or record.message is None:
        return None
    return InformationalMessage(text=record.message)


def evaluate(record: Optional[TransactionRecord], catalog: ItemCatalog) -> Union[Rejected, ItemDeliveryRequest]:
    if record is None:
        return Rejected(reason=RejectionReason.NULL_RECORD)

    if record.product_amount < 1:
        return Rejected(reason=RejectionReason.INVALID_QUANTITY, quantity=record.product_amount)

    item_name = parse_item_name(record.product_id_string)
    definition = catalog.resolve(item_name) if item_name is not None else None
    if definition is None:
        return Rejected(reason=RejectionReason.ITEM_NOT_FOUND, item_name=item_name, quantity=record.product_amount)

    return ItemDeliveryRequest(item_name=item_name, quantity=record.product_amount, definition=definition)
