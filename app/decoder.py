from typing import List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from app.contracts.contracts import TransactionRecord
from app.errors import TransactionDecodeError
from app.logging_config import get_logger


logger = get_logger(__name__)

_records_adapter = TypeAdapter(List[Optional[TransactionRecord]])


def decode_transactions(raw_payload: Union[bytes, str]) -> List[Optional[TransactionRecord]]:
    """
    Parse a store response body into records, keeping ``null`` entries in place.
    """
    try:
        records = _records_adapter.validate_json(raw_payload)
    except ValidationError as exc:
        raise TransactionDecodeError(f"malformed transaction payload: {exc.error_count()} error(s)") from exc
    logger.info("Decoded %s transaction record(s)", len(records))
    return records
