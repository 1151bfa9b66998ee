from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class RejectionReason(str, Enum):
    NULL_RECORD = "null_record"
    INVALID_QUANTITY = "invalid_quantity"
    ITEM_NOT_FOUND = "item_not_found"
    CREATION_FAILED = "creation_failed"


class InformationalMessage(BaseModel):
    kind: Literal["informational"] = "informational"
    text: str


class ItemGrantedDirectly(BaseModel):
    kind: Literal["granted"] = "granted"
    item_name: str
    quantity: int
    recipient: str


class ItemGrantedByFallbackDrop(BaseModel):
    kind: Literal["dropped"] = "dropped"
    item_name: str
    quantity: int
    recipient: str


class Rejected(BaseModel):
    kind: Literal["rejected"] = "rejected"
    reason: RejectionReason
    item_name: Optional[str] = None
    quantity: Optional[int] = None


class ServiceOffline(BaseModel):
    kind: Literal["service_offline"] = "service_offline"
    status_code: Optional[int] = None
    detail: str = ""


class ProcessingError(BaseModel):
    kind: Literal["processing_error"] = "processing_error"
    detail: str = ""


class ItemDeliveryRequest(BaseModel):
    item_name: str
    quantity: int
    definition: Any = None


FulfillmentOutcome = Union[
    InformationalMessage,
    ItemGrantedDirectly,
    ItemGrantedByFallbackDrop,
    Rejected,
    ServiceOffline,
    ProcessingError,
]


class Report(BaseModel):
    user_message: str
    log_message: Optional[str] = None


class ClaimResult(BaseModel):
    recipient_id: str
    outcomes: list[FulfillmentOutcome] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)

    @property
    def delivered(self) -> list[FulfillmentOutcome]:
        return [o for o in self.outcomes if isinstance(o, (ItemGrantedDirectly, ItemGrantedByFallbackDrop))]

    @property
    def rejected(self) -> list[Rejected]:
        return [o for o in self.outcomes if isinstance(o, Rejected)]
