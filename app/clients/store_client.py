from typing import Optional

import httpx

from app.config import StoreConfig, settings
from app.contracts.contracts import ClaimRequest
from app.errors import StoreUnavailableError
from app.logging_config import get_logger


logger = get_logger(__name__)


class StoreClient:
    """
    Fetches a player's pending purchases. One request per claim, no retries:
    a failed fetch is reported to the player instead.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = str(url or settings.store_api_url)
        timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def fetch_transactions(self, player_id: str, config: StoreConfig) -> bytes:
        body = ClaimRequest(playerName=player_id).model_dump()
        try:
            resp = await self.client.post(self.url, json=body, headers=config.headers)
        except httpx.RequestError as exc:
            raise StoreUnavailableError(None, f"store request error: {exc}") from exc
        if resp.status_code != 200 or not resp.content:
            raise StoreUnavailableError(resp.status_code, resp.text or "No response")
        logger.info("Fetched transactions for player=%s bytes=%s", player_id, len(resp.content))
        return resp.content


store_client = StoreClient()
