# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import StreamingChatGenerator, RelayStream
from .types import (
    Message,
    GenerationRequest,
    GenerationEnvelope,
    DataFragment,
    StreamError,
    StreamEnd,
    RelayMessage,
)
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "StreamingChatGenerator",
    "RelayStream",
    "Message",
    "GenerationRequest",
    "GenerationEnvelope",
    "DataFragment",
    "StreamError",
    "StreamEnd",
    "RelayMessage",
    "EchoDevClient",
]
