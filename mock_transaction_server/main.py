"""Mock transaction source serving synthetic owner histories for local runs and e2e tests"""

import random
from datetime import date, timedelta

import uvicorn
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Mock Transaction Server", version="1.0.0")

HISTORY_END = date(2025, 12, 31)


def _monthly(prefix, day_of_month, amount_cents, txn_type, description, months=36):
    records = []
    for i in range(months):
        year, month = 2023 + i // 12, i % 12 + 1
        records.append(
            {
                "id": f"{prefix}_{i}",
                "date": date(year, month, day_of_month).isoformat(),
                "description": description,
                "category": "Income" if txn_type == "income" else "Housing",
                "amount_cents": amount_cents,
                "type": txn_type,
            }
        )
    return records


def _steady():
    return _monthly("pay", 1, 300000, "income", "Paycheck") + _monthly("rent", 5, 200000, "expense", "Rent")


def _deficit():
    return _monthly("pay", 1, 100000, "income", "Paycheck") + _monthly("rent", 5, 200000, "expense", "Rent")


def _sparse():
    start = HISTORY_END - timedelta(days=9)
    return [
        {"id": "s_0", "date": start.isoformat(), "description": "Freelance", "category": "Income", "amount_cents": 150000, "type": "income"},
        {"id": "s_1", "date": (start + timedelta(days=4)).isoformat(), "description": "Groceries", "category": "Food", "amount_cents": 4500, "type": "expense"},
        {"id": "s_2", "date": HISTORY_END.isoformat(), "description": "Utilities", "category": "Bills", "amount_cents": 8000, "type": "expense"},
    ]


def _gig():
    # Irregular payouts from several platforms, weekly groceries
    rng = random.Random(42)
    records = []
    day = date(2025, 1, 1)
    i = 0
    while day <= HISTORY_END:
        if rng.random() < 0.3:
            platform = rng.choice(["Rideshare payout", "Delivery payout", "Marketplace sale"])
            records.append(
                {"id": f"g_{i}", "date": day.isoformat(), "description": platform, "category": "Income",
                 "amount_cents": rng.randint(5000, 60000), "type": "income"}
            )
            i += 1
        if day.weekday() == 5:
            records.append(
                {"id": f"g_{i}", "date": day.isoformat(), "description": "Groceries", "category": "Food",
                 "amount_cents": rng.randint(6000, 14000), "type": "expense"}
            )
            i += 1
        day += timedelta(days=1)
    return records


PERSONAS = {
    "owner_steady": _steady,
    "owner_deficit": _deficit,
    "owner_sparse": _sparse,
    "owner_gig": _gig,
}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/transactions")
def get_transactions(owner_id: str):
    persona = PERSONAS.get(owner_id)
    if persona is None:
        raise HTTPException(status_code=404, detail="owner not found")
    return {"transactions": persona()}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8001)
