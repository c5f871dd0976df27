from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
from typing import Optional
import json
import os

app = FastAPI(title="Mock Bookkeeping API", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/bookkeeping_stub") if os.path.exists("/bookkeeping_stub") else Path(__file__).resolve().parents[1] / "bookkeeping_stub"
TOKEN = "mock-token"


def load(name: str):
    return json.loads((DATA_DIR / f"{name}.json").read_text())


def require_token(authorization: Optional[str]) -> None:
    if authorization != f"Bearer {TOKEN}":
        raise HTTPException(status_code=401, detail="unauthorized")


def not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "message": message})


@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/auth/login")
def login(body: dict):
    users = load("users")
    user = next((u for u in users if u["email"] == body.get("email") and u["password"] == body.get("password")), None)
    if user is None:
        return JSONResponse(status_code=401, content={"success": False, "message": "Invalid email or password"})
    return {"success": True, "message": "Login successful", "token": TOKEN,
            "user": {k: user[k] for k in ("id", "name", "email")}}

@app.get("/customers/all")
def customers_all(authorization: Optional[str] = Header(None)):
    require_token(authorization)
    return {"customers": load("customers")}

@app.get("/customers/{customer_id}")
def customer(customer_id: int, authorization: Optional[str] = Header(None)):
    require_token(authorization)
    found = next((c for c in load("customers") if c["id"] == customer_id), None)
    if found is None:
        return not_found("Customer not found")
    debts = [d for d in load("debts") if d["customerId"] == customer_id]
    payments = [p for p in load("payments") if p["customerId"] == customer_id]
    return {"customer": {**found, "debts": debts, "payments": payments}}

@app.get("/debts/customers-with-debts")
def customers_with_debts(authorization: Optional[str] = Header(None)):
    require_token(authorization)
    debts = load("debts")
    return {"customers": [
        {"id": c["id"], "name": c["name"], "phone": c["phone"],
         "debts": [d for d in debts if d["customerId"] == c["id"]]}
        for c in load("customers")
    ]}

@app.get("/debts/customer/{customer_id}")
def customer_debts(customer_id: int, authorization: Optional[str] = Header(None)):
    require_token(authorization)
    return {"debts": [d for d in load("debts") if d["customerId"] == customer_id]}

@app.get("/debts/customer/{customer_id}/unpaid")
def customer_unpaid_debts(customer_id: int, authorization: Optional[str] = Header(None)):
    require_token(authorization)
    return {"debts": [d for d in load("debts") if d["customerId"] == customer_id and not d["isPaid"]]}

@app.get("/payments/customer/{customer_id}")
def customer_payments(customer_id: int, authorization: Optional[str] = Header(None)):
    require_token(authorization)
    if customer_id == 3:
        return JSONResponse(status_code=500, content={"success": False, "message": "Payments store unavailable"})
    return {"payments": [p for p in load("payments") if p["customerId"] == customer_id]}
