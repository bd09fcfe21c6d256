# Dummy streaming client for local dev and testing without a model server.
# Streams the last user message back one word per fragment.

import asyncio
from typing import AsyncIterator

from ..types import DataFragment, GenerationRequest, RelayMessage, StreamEnd


class EchoDevClient:
    def __init__(self, delay: float = 0.0):
        self.model = "echo-dev"
        self.delay = delay

    async def stream(self, request: GenerationRequest) -> AsyncIterator[RelayMessage]:
        user_inputs = [m.content for m in request.messages if m.role == "user"]
        text = user_inputs[-1] if user_inputs else "(no user input)"
        # persona header is not echoed, only the user's own text
        _, sep, tail = text.rpartition("User: ")
        if sep:
            text = tail
        for word in text.split():
            if self.delay:
                await asyncio.sleep(self.delay)
            yield DataFragment(word)
        yield StreamEnd()
