"""Transaction source HTTP client for fetching an owner's transaction history"""

import httpx
from datetime import date
from typing import List
from cashflow_forecast.domain.models import Transaction, TransactionType
from cashflow_forecast.domain.exceptions import TransactionSourceError
from cashflow_forecast.config import settings


class TransactionClient:
    """Client for the external transaction storage service (read-only)"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.transaction_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_transactions(self, owner_id: str) -> List[Transaction]:
        """
        Fetch the full transaction history for an owner.

        Raises:
            TransactionSourceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/transactions",
                    params={"owner_id": owner_id},
                )
                response.raise_for_status()
                data = response.json()

                return [
                    Transaction(
                        transaction_id=str(txn["id"]),
                        date=date.fromisoformat(txn["date"][:10]),
                        description=txn["description"],
                        category=txn.get("category", ""),
                        amount_cents=int(txn["amount_cents"]),
                        type=TransactionType(txn["type"]),
                    )
                    for txn in data.get("transactions", [])
                ]

            except httpx.TimeoutException as e:
                raise TransactionSourceError(f"Transaction source timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise TransactionSourceError(f"Transaction source error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise TransactionSourceError(f"Transaction source unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise TransactionSourceError(f"Invalid transaction data from source: {e}") from e
