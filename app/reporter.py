from enum import Enum
from typing import Mapping, Optional

from app.logging_config import get_logger
from app.schemas.app_schemas import (
    FulfillmentOutcome,
    InformationalMessage,
    ItemDeliveryRequest,
    ItemGrantedByFallbackDrop,
    ItemGrantedDirectly,
    ProcessingError,
    Rejected,
    RejectionReason,
    Report,
    ServiceOffline,
)


logger = get_logger(__name__)


class MessageKey(str, Enum):
    SERVICE_OFFLINE = "service-offline"
    PERMISSION_DENIED = "permission-denied"
    USAGE_ERROR = "usage-error"
    SECRET_UPDATED = "secret-updated"
    GENERIC_PROCESSING_ERROR = "generic-processing-error"
    NULL_RECORD = "null-record"
    INVALID_AMOUNT = "invalid-amount"
    ITEM_NOT_FOUND = "item-not-found"
    CREATING_ITEM = "creating-item"
    ITEM_GIVEN = "item-given"
    ITEM_DROPPED = "item-dropped"
    CREATION_FAILED = "creation-failed"
    SET_COMMAND_USAGE = "set-command-usage"
    INVALID_COMMAND_TYPE = "invalid-command-type"
    COMMAND_UPDATED = "command-updated"
    INFORMATIONAL_MESSAGE = "passthrough-informational-message"


DEFAULT_MESSAGES: dict[MessageKey, str] = {
    MessageKey.SERVICE_OFFLINE: "API Services are currently offline. Please check back shortly.",
    MessageKey.PERMISSION_DENIED: "Command Reserved for the permission group teamgames.admin",
    MessageKey.USAGE_ERROR: "Usage: /{0} <secret>",
    MessageKey.SECRET_UPDATED: "Store secret key has been updated.",
    MessageKey.GENERIC_PROCESSING_ERROR: "An error occurred while processing your request. Please try again later.",
    MessageKey.NULL_RECORD: "Encountered a null transaction object.",
    MessageKey.INVALID_AMOUNT: "Invalid product amount: {0}",
    MessageKey.ITEM_NOT_FOUND: "Item {0} not found.",
    MessageKey.CREATING_ITEM: "Creating {0} of {1}.",
    MessageKey.ITEM_GIVEN: "Gave {0} {1} to {2}.",
    MessageKey.ITEM_DROPPED: "Dropped {0} {1} to {2}.",
    MessageKey.CREATION_FAILED: "Failed to create item {0}.",
    MessageKey.SET_COMMAND_USAGE: "Usage: /tgsetcmd <claim|secret> <newname>",
    MessageKey.INVALID_COMMAND_TYPE: "Invalid command type. Use 'claim' or 'secret'.",
    MessageKey.COMMAND_UPDATED: "{0} command has been updated to /{1}.",
    MessageKey.INFORMATIONAL_MESSAGE: "{0}",
}


class OutcomeReporter:
    """
    Turns outcomes into player-facing text and operator log lines.

    ``overrides`` replaces individual templates, e.g. with translated text.
    """

    def __init__(self, overrides: Optional[Mapping[MessageKey, str]] = None):
        self.templates = dict(DEFAULT_MESSAGES)
        if overrides:
            self.templates.update({MessageKey(k): v for k, v in overrides.items()})

    def format_message(self, key: MessageKey, *args) -> str:
        template = self.templates[key]
        try:
            return template.format(*args)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Formatting error for key '%s': %s", key.value, exc)
            return template

    def describe_request(self, request: ItemDeliveryRequest) -> str:
        return self.format_message(MessageKey.CREATING_ITEM, request.quantity, request.item_name)

    def describe(self, outcome: FulfillmentOutcome) -> Report:
        if isinstance(outcome, InformationalMessage):
            return Report(user_message=self.format_message(MessageKey.INFORMATIONAL_MESSAGE, outcome.text))

        if isinstance(outcome, ItemGrantedDirectly):
            return Report(
                user_message=self.format_message(
                    MessageKey.ITEM_GIVEN, outcome.quantity, outcome.item_name, outcome.recipient
                )
            )

        if isinstance(outcome, ItemGrantedByFallbackDrop):
            return Report(
                user_message=self.format_message(
                    MessageKey.ITEM_DROPPED, outcome.quantity, outcome.item_name, outcome.recipient
                ),
            )

        if isinstance(outcome, Rejected):
            return self._describe_rejection(outcome)

        if isinstance(outcome, ServiceOffline):
            return Report(
                user_message=self.format_message(MessageKey.SERVICE_OFFLINE),
                log_message=f"Failed to fetch transactions: {outcome.detail or 'No response'} (Code: {outcome.status_code})",
            )

        if isinstance(outcome, ProcessingError):
            return Report(
                user_message=self.format_message(MessageKey.GENERIC_PROCESSING_ERROR),
                log_message=f"Error parsing store response: {outcome.detail}",
            )

        raise TypeError(f"unsupported outcome type: {type(outcome).__name__}")

    def _describe_rejection(self, outcome: Rejected) -> Report:
        if outcome.reason == RejectionReason.NULL_RECORD:
            return Report(
                user_message=self.format_message(MessageKey.NULL_RECORD),
                log_message="Skipped null transaction record",
            )
        if outcome.reason == RejectionReason.INVALID_QUANTITY:
            return Report(
                user_message=self.format_message(MessageKey.INVALID_AMOUNT, outcome.quantity),
                log_message=f"Skipped transaction with invalid amount {outcome.quantity}",
            )
        if outcome.reason == RejectionReason.ITEM_NOT_FOUND:
            name = outcome.item_name or ""
            return Report(
                user_message=self.format_message(MessageKey.ITEM_NOT_FOUND, name),
                log_message=f"Skipped transaction for unknown item '{name}'",
            )
        return Report(
            user_message=self.format_message(MessageKey.CREATION_FAILED, outcome.item_name),
            log_message=f"Item creation failed for {outcome.item_name} x{outcome.quantity}",
        )
