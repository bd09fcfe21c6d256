# Streaming chat generator.
#
# Wires one request through the pipeline:
#   model client -> clean -> augment -> RelayPipe -> response body
# The producer runs as its own task; the HTTP response drains the pipe.

from __future__ import annotations
import asyncio
import contextlib
import logging
import random
from typing import AsyncIterator, Optional

from persona_relay.errors import RelayPipeClosed
from persona_relay.persona import PersonaProfile, augment, build_persona_prompt
from persona_relay.relay import DEFAULT_CAPACITY, RelayPipe, clean
from .types import (
    DataFragment,
    GenerationRequest,
    Message,
    RelayMessage,
    StreamEnd,
    StreamError,
    is_terminal,
)

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = " "


class RelayStream:
    """Consumer side of one relayed request."""

    def __init__(self, pipe: RelayPipe, producer: asyncio.Task, first: Optional[RelayMessage]):
        self._pipe = pipe
        self._producer = producer
        self._first = first
        # a terminal message was seen; the producer is wrapping up on its own
        self._finished = first is None or is_terminal(first)

    @property
    def error(self) -> Optional[BaseException]:
        """Set when the stream failed before producing any fragment."""
        if isinstance(self._first, StreamError):
            return self._first.cause
        return None

    async def iter_text(self) -> AsyncIterator[str]:
        try:
            message = self._first
            while isinstance(message, DataFragment):
                yield message.text
                message = await self._pipe.receive()
            self._finished = True
            if isinstance(message, StreamError):
                logger.warning("Relay ended on upstream error: %s", message.cause)
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        self._pipe.cancel()
        if not self._finished and not self._producer.done():
            logger.info("Client disconnected; releasing upstream")
            self._producer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._producer


class StreamingChatGenerator:
    def __init__(
        self,
        model_client,
        persona: Optional[PersonaProfile] = None,
        rng: Optional[random.Random] = None,
        capacity: int = DEFAULT_CAPACITY,
    ):
        self.model_client = model_client
        self.persona = persona
        self.rng = rng or random.Random()
        self.capacity = capacity

    def build_request(self, model: str, user_message: str) -> GenerationRequest:
        content = build_persona_prompt(self.persona, user_message)
        return GenerationRequest(model=model, messages=(Message(role="user", content=content),))

    def transform(self, raw: str) -> str:
        """Clean one upstream fragment and apply the persona."""
        return augment(clean(raw), self.persona, self.rng)

    async def open(self, request: GenerationRequest) -> RelayStream:
        """Start the producer and wait for the first relay message."""
        pipe = RelayPipe(self.capacity)
        producer = asyncio.create_task(self._produce(request, pipe))
        first = await pipe.receive()
        return RelayStream(pipe, producer, first)

    async def _produce(self, request: GenerationRequest, pipe: RelayPipe) -> None:
        upstream = self.model_client.stream(request)
        try:
            async with contextlib.aclosing(upstream):
                async for message in upstream:
                    if isinstance(message, DataFragment):
                        text = self.transform(message.text)
                        if text:
                            await pipe.send(DataFragment(text + FRAGMENT_SEPARATOR))
                        continue
                    await pipe.send(message)
                    if is_terminal(message):
                        return
            # upstream ended without a terminal message
            await pipe.send(StreamEnd())
        except RelayPipeClosed:
            logger.info("Relay pipe closed; stopping upstream reads")
        except Exception as e:
            logger.exception("Relay producer failed")
            with contextlib.suppress(RelayPipeClosed):
                await pipe.send(StreamError(e))
        finally:
            pipe.close()
