# Streaming client for Ollama's /api/chat.
#
# stream() is an async generator of RelayMessage: zero or more DataFragment
# followed by exactly one StreamEnd or StreamError.

import logging
from typing import AsyncIterator, Optional

import httpx

from persona_relay.errors import UpstreamConnectError, UpstreamStreamError
from ..types import (
    DataFragment,
    GenerationRequest,
    RelayMessage,
    StreamEnd,
    StreamError,
    parse_envelope,
)

logger = logging.getLogger(__name__)

OLLAMA_CHAT_URL = "http://localhost:11434/api/chat"


class OllamaStreamClient:
    def __init__(
        self,
        url: str = OLLAMA_CHAT_URL,
        model: str = "mistral",
        connect_timeout: float = 10.0,
        read_timeout: Optional[float] = None,
        line_framing: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.model = model
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self.line_framing = line_framing
        self._transport = transport

    async def stream(self, request: GenerationRequest) -> AsyncIterator[RelayMessage]:
        # one client per call: nothing is shared between requests
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            http_request = client.build_request("POST", self.url, json=request.to_payload())
            try:
                response = await client.send(http_request, stream=True)
            except httpx.HTTPError as e:
                logger.warning("Upstream connect failed: %r", e)
                yield StreamError(UpstreamConnectError(f"Upstream request failed: {e}"))
                return

            try:
                if not response.is_success:
                    logger.warning("Upstream answered %s", response.status_code)
                    yield StreamError(
                        UpstreamConnectError(
                            f"Upstream answered {response.status_code}",
                            status_code=response.status_code,
                        )
                    )
                    return

                try:
                    async for chunk in self._iter_chunks(response):
                        envelope = parse_envelope(chunk)
                        if envelope is None:
                            logger.debug("Dropped undecodable chunk (%d bytes)", len(chunk))
                            continue
                        if envelope.content is not None:
                            yield DataFragment(envelope.content)
                        if envelope.done:
                            break
                except httpx.HTTPError as e:
                    logger.warning("Upstream stream broke: %r", e)
                    yield StreamError(UpstreamStreamError(f"Upstream stream failed: {e}"))
                    return

                yield StreamEnd()
            finally:
                await response.aclose()

    def _iter_chunks(self, response: httpx.Response) -> AsyncIterator:
        """Raw transport chunks, or whole lines when line framing is on."""
        if self.line_framing:
            return response.aiter_lines()
        return response.aiter_bytes()
