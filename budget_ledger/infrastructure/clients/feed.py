"""Transaction feed HTTP client for pulling raw bank/card records"""

import httpx
from typing import Any, Dict, List
from budget_ledger.domain.exceptions import FeedAPIError
from budget_ledger.config import settings
from budget_ledger.infrastructure.observability.metrics import feed_latency_histogram


class FeedClient:
    """Client for the external scraper feed service"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.feed_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def get_transactions(self, account: str) -> List[Dict[str, Any]]:
        """
        Fetch raw transaction records for one source account.

        Records are returned as-is; per-record validation happens at
        ingestion so one malformed record does not reject the batch.

        Raises:
            FeedAPIError: On timeout, HTTP errors, or an invalid response body
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                with feed_latency_histogram.time():
                    response = await client.get(
                        f"{self.base_url}/feed/transactions",
                        params={"account": account},
                    )
                response.raise_for_status()
                data = response.json()

                transactions = data.get("transactions", [])
                if not isinstance(transactions, list):
                    raise TypeError("transactions must be a list")
                return transactions

            except httpx.TimeoutException as e:
                raise FeedAPIError(f"Feed API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise FeedAPIError(f"Feed API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise FeedAPIError(f"Feed API unreachable: {e}") from e
            except (AttributeError, ValueError, TypeError) as e:
                raise FeedAPIError(f"Invalid feed response: {e}") from e
