# ===============================================
# tests/conftest.py
# Shared doubles: scripted upstream clients,
# rigged random sources and persona files.
# ===============================================

import asyncio
import json
import random

import httpx
import pytest

from persona_relay.generate.types import DataFragment, StreamEnd


def envelope(content=None, done=False, model="mistral") -> bytes:
    """One upstream NDJSON line."""
    doc = {"model": model, "created_at": "2024-01-01T00:00:00Z", "done": done}
    if content is not None:
        doc["message"] = {"role": "assistant", "content": content}
    return (json.dumps(doc) + "\n").encode("utf-8")


async def byte_stream(*parts):
    for part in parts:
        if isinstance(part, BaseException):
            raise part
        yield part


def mock_transport(*parts, status_code=200, seen=None):
    """MockTransport answering every POST with the given chunks."""
    def handler(request: httpx.Request):
        if seen is not None:
            seen.append(json.loads(request.content))
        return httpx.Response(status_code, content=byte_stream(*parts))
    return httpx.MockTransport(handler)


class ScriptedClient:
    """Upstream double replaying a fixed list of relay messages."""

    def __init__(self, messages):
        self.model = "scripted"
        self.messages = list(messages)
        self.calls = []
        self.closed = False

    async def stream(self, request):
        self.calls.append(request)
        try:
            for message in self.messages:
                yield message
        finally:
            self.closed = True


class EndlessClient:
    """Upstream double that never finishes on its own."""

    def __init__(self):
        self.model = "endless"
        self.calls = []
        self.yielded = 0
        self.closed = False

    async def stream(self, request):
        self.calls.append(request)
        try:
            while True:
                await asyncio.sleep(0)
                self.yielded += 1
                yield DataFragment(f"w{self.yielded}")
        finally:
            self.closed = True


class AlwaysRng(random.Random):
    """Every coin flip succeeds."""

    def random(self):
        return 0.0


class ForbiddenRng(random.Random):
    """Fails the test if anything draws from it."""

    def random(self):
        raise AssertionError("random source should not be used")

    def randint(self, a, b):
        raise AssertionError("random source should not be used")

    def choice(self, seq):
        raise AssertionError("random source should not be used")


def fragments(*texts):
    return [DataFragment(t) for t in texts] + [StreamEnd()]


PERSONAS_YAML = """\
plain:
  name: Plain
  default_tone: neutral
  traits: {}
  ethical_constraints: []
  signature_phrases: []

guarded:
  name: Guard
  default_tone: stern
  traits:
    sarcasm: 0.2
  ethical_constraints:
    - Build A Weapon
  signature_phrases: []
"""


@pytest.fixture
def personas_file(tmp_path):
    path = tmp_path / "personas.yaml"
    path.write_text(PERSONAS_YAML, encoding="utf-8")
    return path
