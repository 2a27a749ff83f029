"""batcher.core.client

HTTP client for the remote backtest service.

- one shared ``httpx.AsyncClient`` per sweep (connection reuse)
- no retries: a failed job is reported once
- hard cap on response size; body must be a JSON object

Timeouts are whatever the config says. ``None`` means the network call can
wait forever, and so can the job holding its concurrency slot.
"""

from __future__ import annotations

from typing import Any

import httpx

from batcher.core.config import ServiceConfig
from batcher.core.exceptions import ServiceError

BACKTEST_PATH = "/api/backtest"


class BacktestClient:
    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ServiceConfig()
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(self.config.timeout_s),
            transport=transport,
        )

    async def __aenter__(self) -> BacktestClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _enforce_max_bytes(resp: httpx.Response, *, max_bytes: int) -> None:
        size = len(resp.content)
        if size > int(max_bytes):
            raise ServiceError(f"response_too_large:{size}")

    async def run_backtest(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST one backtest config and return the decoded report.

        Raises:
            httpx.HTTPError: transport failure or non-2xx status.
            ServiceError: body too large, not JSON, or not an object.
        """

        resp = await self._client.post(BACKTEST_PATH, json=payload)
        resp.raise_for_status()
        self._enforce_max_bytes(resp, max_bytes=self.config.max_response_bytes)
        try:
            data: Any = resp.json()
        except ValueError as e:
            raise ServiceError("response_not_json") from e
        if not isinstance(data, dict):
            raise ServiceError("response_schema_mismatch")
        return data
