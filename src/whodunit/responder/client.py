"""Async HTTP client for the remote dialogue backend."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from whodunit.config import ResponderConfig
from whodunit.domain.models import Case, CharacterState
from whodunit.presentation.evidence import DisclosureRecord
from whodunit.responder.prompt import build_system_prompt
from whodunit.responder.tags import MalformedReplyError, ParsedReply, parse_reply

logger = logging.getLogger(__name__)


class ResponderError(RuntimeError):
    """Any failure talking to the backend. Callers fall back to the local engine."""


class ResponderClient:
    """Posts a character brief plus conversation to the chat proxy.

    The proxy takes ``{"system": ..., "messages": [...]}`` and answers with
    ``{"content": [{"text": ...}]}``.

    Usage:
        client = ResponderClient(ResponderConfig.from_env())
        parsed = await client.respond(question, character, case, history, disclosures)
    """

    def __init__(
        self,
        config: Optional[ResponderConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            config: Endpoint and timeout settings (default: ``ResponderConfig()``)
            transport: Optional httpx transport, used by tests
        """
        self.config = config or ResponderConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout = self.config.timeout
        self._transport = transport

        logger.info(f"Initialized {self.__class__.__name__} with base_url={self.base_url}")

    def _headers(self) -> dict:
        return {"Content-Type": "application/json"}

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _health_url(self) -> str:
        if self.base_url.endswith("/chat"):
            return self.base_url[: -len("/chat")] + "/health"
        return f"{self.base_url}/health"

    async def respond(
        self,
        question: str,
        character: CharacterState,
        case: Case,
        history: Optional[list[dict[str, str]]] = None,
        disclosures: Optional[list[DisclosureRecord]] = None,
    ) -> ParsedReply:
        """Ask the backend to answer ``question`` in character.

        Raises:
            ResponderError: On transport errors, an unusable URL, non-2xx status, or a body
                without ``content[0].text``.
        """
        payload = {
            "system": build_system_prompt(character, case, disclosures or []),
            "messages": [*(history or []), {"role": "user", "content": question}],
        }
        try:
            async with self._get_client() as client:
                response = await client.post(self.base_url, json=payload, headers=self._headers())
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(f"Responder request failed: {exc}")
            raise ResponderError(f"responder request failed: {exc}") from exc
        except ValueError as exc:
            logger.warning(f"Responder returned a non-JSON body: {exc}")
            raise ResponderError("responder returned a non-JSON body") from exc

        try:
            text = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.warning("Responder reply is missing content[0].text")
            raise ResponderError("responder reply is missing content[0].text") from exc
        if not isinstance(text, str):
            raise ResponderError("responder reply text is not a string")

        try:
            return parse_reply(text, speaker=character)
        except MalformedReplyError as exc:
            logger.warning(f"Responder reply rejected: {exc}")
            raise ResponderError(str(exc)) from exc

    async def is_available(self) -> bool:
        try:
            async with self._get_client() as client:
                response = await client.get(self._health_url())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.info(f"Responder health check failed: {exc}")
            return False
        return response.is_success
