import logging
import os
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel
from sqlalchemy import Boolean, Column, DateTime, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.sql import func

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("mock-store")

DB_URL = os.getenv("STORE_DB_URL", "sqlite:///./store.db")
API_KEY = os.getenv("STORE_SECRET_KEY", "default-key")
engine = create_engine(DB_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

app = FastAPI(title="Mock Store")


class ClaimBody(BaseModel):
    playerName: str


class PurchaseIn(BaseModel):
    playerName: str
    productId: Optional[str] = None
    amount: int = 1
    message: Optional[str] = None


class Purchase(Base):
    __tablename__ = "purchases"
    id = Column(Integer, primary_key=True)
    player = Column(String, index=True, nullable=False)
    product_id = Column(String, nullable=True)
    amount = Column(Integer, nullable=False)
    message = Column(String, nullable=True)
    claimed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _serialize(purchase: Purchase) -> dict:
    record = {
        "player_name": purchase.player,
        "product_id_string": purchase.product_id,
        "product_amount": purchase.amount,
    }
    if purchase.message is not None:
        record["message"] = purchase.message
    return record


@app.post("/api/v3/store/transaction/update")
async def claim_transactions(
    body: ClaimBody,
    x_api_key: str | None = Header(None),
    db: Session = Depends(get_db),
):
    if x_api_key != API_KEY:
        logger.warning("Rejected claim for player=%s: bad api key", body.playerName)
        raise HTTPException(status_code=401, detail="invalid api key")

    pending: List[Purchase] = (
        db.query(Purchase)
        .filter(Purchase.player == body.playerName)
        .filter(Purchase.claimed.is_(False))
        .order_by(Purchase.id)
        .all()
    )
    for purchase in pending:
        purchase.claimed = True
        db.add(purchase)
    db.commit()
    logger.info("Returning %s pending purchase(s) for player=%s", len(pending), body.playerName)
    return [_serialize(p) for p in pending]


@app.post("/admin/purchases")
async def add_purchase(body: PurchaseIn, db: Session = Depends(get_db)):
    purchase = Purchase(
        player=body.playerName,
        product_id=body.productId,
        amount=body.amount,
        message=body.message,
        claimed=False,
    )
    db.add(purchase)
    db.commit()
    db.refresh(purchase)
    logger.info("Seeded purchase id=%s player=%s product=%s", purchase.id, purchase.player, purchase.product_id)
    return {"id": purchase.id}


@app.post("/admin/clear-db")
async def clear_db(db: Session = Depends(get_db)):
    """
    Dangerous: clears all mock purchases.
    """
    db.query(Purchase).delete()
    db.commit()
    logger.warning("Cleared mock store purchases via admin endpoint")
    return {"status": "cleared"}


@app.get("/health")
async def health():
    return {"status": "ok"}
