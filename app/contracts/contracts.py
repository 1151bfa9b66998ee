from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# store amounts are 32-bit signed on the wire
Int32 = Annotated[StrictInt, Field(ge=-2**31, le=2**31 - 1)]


class ClaimRequest(BaseModel):
    playerName: str


class TransactionRecord(BaseModel):
    """
    One pending purchase as returned by the store API.

    ``player_name`` is informational; deliveries always go to the claiming player.
    """
    model_config = ConfigDict(extra="ignore")

    player_name: Optional[str] = None
    product_id_string: Optional[str] = None
    product_amount: Int32 = 0
    message: Optional[str] = None
