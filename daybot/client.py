"""
HTTP client for the assistant endpoint.

Falls back to the local deterministic plan whenever the server cannot answer,
so callers always get something to show.
"""

import logging
from typing import Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from . import config
from .models import PlanContext, context_to_dict
from .planner import format_plan

logger = logging.getLogger(__name__)


class AssistantError(Exception):
    """Raised when the assistant endpoint does not return a usable reply."""
    pass


class AssistantClient:
    """
    Client for the ``/api/ai`` endpoint.

    Example:
        >>> client = AssistantClient("http://localhost:8000")
        >>> print(client.ask("Plan my day", ctx))
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: Server root (default: DAYBOT_SERVER_URL)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = (base_url or config.DAYBOT_SERVER_URL).rstrip('/')
        self.timeout = timeout
        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
            headers={"User-Agent": "DailyAIBot/0.1 (AssistantClient)"},
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "AssistantClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True
    )
    def _post(self, payload: dict) -> httpx.Response:
        return self.client.post(f"{self.base_url}/api/ai", json=payload)

    def request_reply(self, prompt: str, ctx: PlanContext) -> str:
        """
        Ask the server for a reply.

        Raises:
            AssistantError: on transport errors, non-2xx status or a malformed body
        """
        payload = {"message": prompt, "context": context_to_dict(ctx)}
        try:
            response = self._post(payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise AssistantError(f"Request failed: {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise AssistantError(f"Request failed: {e}") from e

        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise AssistantError("Response has no 'reply' field")
        return reply

    def ask(self, prompt: str, ctx: PlanContext) -> str:
        try:
            return self.request_reply(prompt, ctx)
        except AssistantError as e:
            logger.warning(f"Assistant unavailable, using local plan: {e}")
            return format_plan(prompt, ctx)
