"""
Transactions API Client

HTTP client for the backend that owns transaction persistence.
"""

import json
import logging
from typing import Optional, Any

import httpx

from ..models.transaction import Transaction, TransactionFilter

logger = logging.getLogger(__name__)


class TransactionClient:
    """
    Client for the backend transactions API.

    Errors are not swallowed here: non-2xx responses raise
    ``httpx.HTTPStatusError``, timeouts raise ``httpx.TimeoutException`` and
    a success status without a JSON body raises ``httpx.DecodingError``.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize transactions client.

        Args:
            base_url: Base URL of the backend API
            api_token: Bearer token sent with every request
            timeout: Per-request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        """Make an HTTP request against the backend"""
        url = f"{self.base_url}{path}"
        body_str = json.dumps(body) if body is not None else None

        response = await self._http_client.request(
            method=method,
            url=url,
            headers=self._generate_headers(),
            content=body_str,
            params=params,
        )

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Unreadable response: {response.status_code} - {response.text[:200]}")
            raise httpx.DecodingError(
                f"Expected a JSON body, got {response.headers.get('content-type', 'nothing')}",
                request=response.request,
            ) from e

    # ==================== Transactions ====================

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """POST a finalized transaction; returns the server-confirmed record"""
        data = await self._request(
            "POST",
            "/transactions",
            body=transaction.model_dump(mode="json"),
        )
        return Transaction.model_validate(data)

    async def get_transaction(self, transaction_id: str) -> Transaction:
        data = await self._request("GET", f"/transactions/{transaction_id}")
        return Transaction.model_validate(data)

    async def get_transaction_by_number(self, transaction_number: str) -> Transaction:
        data = await self._request("GET", f"/transactions/number/{transaction_number}")
        return Transaction.model_validate(data)

    async def list_transactions(self, page: int = 1, limit: int = 50) -> tuple[list[Transaction], int]:
        """List transactions page by page; returns (transactions, total)"""
        data = await self._request(
            "GET",
            "/transactions",
            params={"page": str(page), "limit": str(limit)},
        )
        return self._parse_page(data)

    async def search_transactions(
        self,
        filter: TransactionFilter,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[Transaction], int]:
        """Search transaction history, forwarding filter fields as query parameters"""
        params = {"page": str(page), "limit": str(limit)}
        params.update(filter_params(filter))
        data = await self._request("GET", "/transactions/search", params=params)
        return self._parse_page(data)

    async def refund_transaction(self, transaction_id: str, reason: str) -> Transaction:
        data = await self._request(
            "POST",
            f"/transactions/{transaction_id}/refund",
            body={"reason": reason},
        )
        return Transaction.model_validate(data)

    async def cancel_transaction(self, transaction_id: str, reason: str) -> Transaction:
        data = await self._request(
            "POST",
            f"/transactions/{transaction_id}/cancel",
            body={"reason": reason},
        )
        return Transaction.model_validate(data)

    @staticmethod
    def _parse_page(data: dict) -> tuple[list[Transaction], int]:
        transactions = [Transaction.model_validate(t) for t in data.get("transactions", [])]
        return transactions, data.get("total", len(transactions))


def filter_params(filter: TransactionFilter) -> dict[str, str]:
    """Translate a TransactionFilter into backend query parameters"""
    params = {}
    if filter.start_date:
        params["startDate"] = filter.start_date.isoformat()
    if filter.end_date:
        params["endDate"] = filter.end_date.isoformat()
    if filter.payment_method:
        params["paymentMethod"] = filter.payment_method.value
    if filter.cashier_id:
        params["cashierId"] = filter.cashier_id
    if filter.customer_id:
        params["customerId"] = filter.customer_id
    if filter.status:
        params["status"] = filter.status.value
    if filter.min_amount is not None:
        params["minAmount"] = str(filter.min_amount)
    if filter.max_amount is not None:
        params["maxAmount"] = str(filter.max_amount)
    if filter.search_term:
        params["search"] = filter.search_term
    return params
