from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel
from typing import Optional
import os
import uuid

app = FastAPI(title="Mock MoMo Gateway", version="1.0.0")
# Recipients ending in these digits are declined, for exercising the failure path
DECLINE_SUFFIX = os.environ.get("MOCK_DECLINE_SUFFIX", "000")
USD_GHS_RATE = float(os.environ.get("MOCK_USD_GHS_RATE", "12.5"))

_payouts: dict[str, dict] = {}


class PayoutRequest(BaseModel):
    amount: str
    currency: str
    recipient: str
    idempotency_key: str


@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/rates/usd-ghs")
def usd_ghs_rate(): return {"rate": USD_GHS_RATE}

@app.post("/payouts")
def create_payout(body: PayoutRequest, idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key")):
    key = idempotency_key or body.idempotency_key
    if key in _payouts:
        return _payouts[key]
    if body.currency != "GHS":
        raise HTTPException(status_code=400, detail="only GHS payouts are supported")
    if body.recipient.endswith(DECLINE_SUFFIX):
        result = {"success": False, "message": "Recipient wallet not registered for MoMo"}
    else:
        result = {"success": True, "message": "Payout sent", "provider_transaction_id": f"momo_{uuid.uuid4().hex[:12]}"}
    _payouts[key] = result
    return result
