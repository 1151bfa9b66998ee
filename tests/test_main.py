import asyncio
import json

import httpx
import pytest

from app.claims import process_claim, reconcile
from app.clients.store_client import StoreClient
from app.contracts.contracts import TransactionRecord
from app.contracts.game import GameServices
from app.schemas.app_schemas import (
    InformationalMessage,
    ItemGrantedByFallbackDrop,
    ItemGrantedDirectly,
    ProcessingError,
    Rejected,
    RejectionReason,
    ServiceOffline,
)
from conftest import FakeInventory

STORE_URL = "http://store.test/api/v3/store/transaction/update"


def _client_returning(status_code, body, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        content = body if isinstance(body, (bytes, str)) else json.dumps(body)
        return httpx.Response(status_code, content=content)

    return StoreClient(url=STORE_URL, transport=httpx.MockTransport(handler))


def _run(recipient, store_config, services, client, notify=None):
    return asyncio.run(process_claim(recipient, store_config, services, client=client, notify=notify))


# Purchase delivered straight into the inventory.
def test_purchase_granted_directly(recipient, store_config, services, inventory, world):
    client = _client_returning(200, [{"product_id_string": "store:wood", "product_amount": 100}])

    result = _run(recipient, store_config, services, client)

    assert result.outcomes == [ItemGrantedDirectly(item_name="wood", quantity=100, recipient="Bob")]
    assert result.messages == ["Creating 100 of wood.", "Gave 100 wood to Bob."]
    assert len(inventory.items) == 1
    assert inventory.items[0].quantity == 100
    assert world.dropped == []


# Full inventory falls back to a drop, the item is not lost.
def test_full_inventory_drops_item(recipient, store_config, catalog, world):
    services = GameServices(catalog=catalog, inventory=FakeInventory(slots=0), world=world)
    client = _client_returning(200, [{"product_id_string": "store:wood", "product_amount": 100}])

    result = _run(recipient, store_config, services, client)

    assert result.outcomes == [ItemGrantedByFallbackDrop(item_name="wood", quantity=100, recipient="Bob")]
    assert result.messages[-1] == "Dropped 100 wood to Bob."
    assert len(world.dropped) == 1
    dropped_item, dropped_for = world.dropped[0]
    assert dropped_item is catalog.created[0]
    assert dropped_for == recipient.id


# A single record carrying a message is only shown, never delivered.
def test_single_message_batch_is_informational(recipient, store_config, services, catalog, inventory):
    client = _client_returning(
        200, [{"message": "Welcome back!", "product_id_string": "store:wood", "product_amount": 5}]
    )

    result = _run(recipient, store_config, services, client)

    assert result.outcomes == [InformationalMessage(text="Welcome back!")]
    assert result.messages == ["Welcome back!"]
    assert catalog.resolved == []
    assert inventory.items == []


# Bad records are reported one by one without aborting the pass.
def test_rejected_records_do_not_abort_pass(recipient, store_config, services, catalog):
    client = _client_returning(200, [None, {"product_id_string": "x", "product_amount": 0}])

    result = _run(recipient, store_config, services, client)

    assert [o.reason for o in result.outcomes] == [RejectionReason.NULL_RECORD, RejectionReason.INVALID_QUANTITY]
    assert result.messages == ["Encountered a null transaction object.", "Invalid product amount: 0"]
    assert catalog.resolved == []


# A non-200 answer ends the pass with one offline message.
def test_service_offline_skips_decoding(recipient, store_config, services, monkeypatch):
    client = _client_returning(503, "maintenance")

    def fail_decode(_payload):
        raise AssertionError("decoder must not run")

    monkeypatch.setattr("app.claims.decode_transactions", fail_decode)

    result = _run(recipient, store_config, services, client)

    assert result.outcomes == [ServiceOffline(status_code=503, detail="maintenance")]
    assert result.messages == ["API Services are currently offline. Please check back shortly."]


def test_empty_body_is_service_offline(recipient, store_config, services):
    result = _run(recipient, store_config, services, _client_returning(200, b""))

    assert len(result.outcomes) == 1
    assert isinstance(result.outcomes[0], ServiceOffline)


def test_malformed_payload_is_processing_error(recipient, store_config, services, inventory):
    client = _client_returning(200, '{"product_id_string": "store:wood"}')

    result = _run(recipient, store_config, services, client)

    assert len(result.outcomes) == 1
    assert isinstance(result.outcomes[0], ProcessingError)
    assert result.messages == ["An error occurred while processing your request. Please try again later."]
    assert inventory.items == []


def test_mixed_batch_delivers_valid_records(recipient, store_config, catalog, world):
    catalog.broken.add("stone")
    services = GameServices(catalog=catalog, inventory=FakeInventory(slots=1), world=world)
    payload = [
        {"product_id_string": "store:wood", "product_amount": 10},
        {"product_id_string": "store:unobtainium", "product_amount": 1},
        {"product_id_string": "store:stone", "product_amount": 3},
        None,
        {"product_id_string": "rifle.ak", "product_amount": 1},
    ]

    result = _run(recipient, store_config, services, _client_returning(200, payload))

    assert result.outcomes == [
        ItemGrantedDirectly(item_name="wood", quantity=10, recipient="Bob"),
        Rejected(reason=RejectionReason.ITEM_NOT_FOUND, item_name="unobtainium", quantity=1),
        Rejected(reason=RejectionReason.CREATION_FAILED, item_name="stone", quantity=3),
        Rejected(reason=RejectionReason.NULL_RECORD),
        ItemGrantedByFallbackDrop(item_name="rifle.ak", quantity=1, recipient="Bob"),
    ]
    assert "Item unobtainium not found." in result.messages
    assert "Failed to create item stone." in result.messages


def test_every_resolvable_record_is_delivered(recipient, store_config, services):
    records = [{"product_id_string": f"store:{name}", "product_amount": n + 1}
               for n, name in enumerate(["wood", "stone", "rifle.ak", "wood"])]

    result = _run(recipient, store_config, services, _client_returning(200, records))

    assert len(result.outcomes) == 4
    assert not any(isinstance(o, Rejected) for o in result.outcomes)
    assert len(result.delivered) == 4


def test_empty_batch_yields_no_outcomes(recipient, store_config, services, caplog):
    result = _run(recipient, store_config, services, _client_returning(200, "[]"))

    assert result.outcomes == []
    assert result.messages == []
    assert "No transactions found" in caplog.text


def test_notify_receives_every_message(recipient, store_config, services):
    seen = []
    client = _client_returning(200, [{"product_id_string": "store:wood", "product_amount": 2}])

    result = _run(recipient, store_config, services, client, notify=seen.append)

    assert seen == result.messages


def test_claim_request_shape(recipient, store_config, services):
    calls = []
    client = _client_returning(200, "[]", calls=calls)

    _run(recipient, store_config, services, client)

    assert len(calls) == 1
    request = calls[0]
    assert request.method == "POST"
    assert str(request.url) == STORE_URL
    assert request.headers["X-API-Key"] == "test-key"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"playerName": recipient.id}


def test_rejections_are_logged_for_operators(recipient, services, caplog):
    reconcile([None], recipient, services)

    assert "Skipped null transaction record" in caplog.text


@pytest.mark.parametrize("quantity", [0, -1, -500])
def test_quantity_checked_before_identifier(recipient, services, catalog, quantity):
    records = [
        TransactionRecord(product_id_string="store:nothing", product_amount=quantity),
        TransactionRecord(product_id_string="store:wood", product_amount=quantity),
    ]

    result = reconcile(records, recipient, services)

    assert [o.reason for o in result.outcomes] == [RejectionReason.INVALID_QUANTITY] * 2
    assert [o.quantity for o in result.outcomes] == [quantity, quantity]
    assert catalog.resolved == []


def _client_raising(error_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error_type("store unreachable", request=request)

    return StoreClient(url=STORE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("error_type", [httpx.ConnectError, httpx.ReadTimeout])
def test_transport_error_is_service_offline(recipient, store_config, services, inventory, error_type):
    result = _run(recipient, store_config, services, _client_raising(error_type))

    assert len(result.outcomes) == 1
    outcome = result.outcomes[0]
    assert isinstance(outcome, ServiceOffline)
    assert outcome.status_code is None
    assert "store unreachable" in outcome.detail
    assert result.messages == ["API Services are currently offline. Please check back shortly."]
    assert inventory.items == []


def test_whitespace_body_is_processing_error(recipient, store_config, services):
    result = _run(recipient, store_config, services, _client_returning(200, b"  \n"))

    assert len(result.outcomes) == 1
    assert isinstance(result.outcomes[0], ProcessingError)


def test_pass_without_config_uses_settings(recipient, services, monkeypatch):
    from app.config import Settings

    monkeypatch.setenv("STORE_SECRET_KEY", "env-key")
    monkeypatch.setattr("app.config.settings", Settings())
    calls = []

    _run(recipient, None, services, _client_returning(200, "[]", calls=calls))

    assert calls[0].headers["X-API-Key"] == "env-key"
