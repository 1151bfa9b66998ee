from typing import Callable, List, Optional

from app.clients.store_client import StoreClient, store_client
from app.config import StoreConfig
from app.contracts.contracts import TransactionRecord
from app.contracts.game import GameServices, Recipient
from app.decoder import decode_transactions
from app.delivery import deliver
from app.errors import StoreUnavailableError, TransactionDecodeError
from app.logging_config import get_logger
from app.policy import evaluate, informational_outcome
from app.reporter import OutcomeReporter
from app.schemas.app_schemas import (
    ClaimResult,
    FulfillmentOutcome,
    ItemDeliveryRequest,
    ProcessingError,
    ServiceOffline,
)


logger = get_logger(__name__)

Notify = Callable[[str], None]


class _Pass:
    def __init__(self, recipient: Recipient, reporter: OutcomeReporter, notify: Optional[Notify]):
        self.recipient = recipient
        self.reporter = reporter
        self.notify = notify
        self.result = ClaimResult(recipient_id=recipient.id)

    def say(self, message: str) -> None:
        self.result.messages.append(message)
        if self.notify is not None:
            self.notify(message)

    def record(self, outcome: FulfillmentOutcome) -> None:
        report = self.reporter.describe(outcome)
        self.result.outcomes.append(outcome)
        self.say(report.user_message)
        if report.log_message:
            logger.warning("%s (recipient=%s)", report.log_message, self.recipient.id)


async def process_claim(
    recipient: Recipient,
    config: Optional[StoreConfig],
    services: GameServices,
    client: StoreClient = store_client,
    reporter: Optional[OutcomeReporter] = None,
    notify: Optional[Notify] = None,
) -> ClaimResult:
    """
    Run one claim pass: fetch the pending purchases for ``recipient``, then
    decode, evaluate, deliver and report each one.

    Without an explicit ``config`` the pass uses the environment settings.
    """
    config = config or StoreConfig.from_settings()
    reporter = reporter or OutcomeReporter()
    logger.info("Claim requested by recipient=%s", recipient.id)
    try:
        payload = await client.fetch_transactions(recipient.id, config)
    except StoreUnavailableError as exc:
        claim = _Pass(recipient, reporter, notify)
        claim.record(ServiceOffline(status_code=exc.status_code, detail=exc.detail))
        return claim.result

    try:
        records = decode_transactions(payload)
    except TransactionDecodeError as exc:
        claim = _Pass(recipient, reporter, notify)
        claim.record(ProcessingError(detail=str(exc)))
        return claim.result

    return reconcile(records, recipient, services, reporter, notify)


def reconcile(
    records: List[Optional[TransactionRecord]],
    recipient: Recipient,
    services: GameServices,
    reporter: Optional[OutcomeReporter] = None,
    notify: Optional[Notify] = None,
) -> ClaimResult:
    """
    Apply an already decoded batch. A rejected record is reported and skipped;
    it never stops the rest of the batch.
    """
    claim = _Pass(recipient, reporter or OutcomeReporter(), notify)

    if not records:
        logger.warning("No transactions found in the response for recipient=%s", recipient.id)
        return claim.result

    notice = informational_outcome(records)
    if notice is not None:
        claim.record(notice)
        return claim.result

    for record in records:
        decision = evaluate(record, services.catalog)
        if isinstance(decision, ItemDeliveryRequest):
            claim.say(claim.reporter.describe_request(decision))
            claim.record(deliver(decision, recipient, services))
        else:
            claim.record(decision)

    logger.info(
        "Claim finished for recipient=%s delivered=%s rejected=%s",
        recipient.id,
        len(claim.result.delivered),
        len(claim.result.rejected),
    )
    return claim.result
