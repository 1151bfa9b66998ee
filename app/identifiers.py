from typing import Optional


def parse_item_name(product_identifier: Optional[str]) -> Optional[str]:
    """
    Turn a store product id such as ``store:wood`` into the engine item name.

    Ids without a namespace are used as-is. Only the segment right after the
    first colon is kept, so ``a:b:c`` resolves to ``b``.
    """
    if not product_identifier:
        return None
    parts = product_identifier.split(":")
    return parts[1] if len(parts) > 1 else parts[0]
