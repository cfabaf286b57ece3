from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

READINGS_PATH = "/api/v1/readings"


class IngestClient:
    """Posts averaged readings to the API. Failures are reported, never retried."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def send(self, temperature: float, humidity: float) -> bool:
        try:
            resp = self._client.post(
                READINGS_PATH,
                json={"temperature": temperature, "humidity": humidity},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Reading rejected",
                extra={"status": e.response.status_code, "temperature": temperature, "humidity": humidity},
            )
            return False
        except httpx.HTTPError as e:
            logger.warning("Reading not delivered", extra={"error": repr(e)})
            return False
        return True
