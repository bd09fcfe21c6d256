# Typed structures shared by the upstream clients and the relay.
#
# GenerationRequest/Message go out, GenerationEnvelope comes back (one per
# upstream chunk), and RelayMessage is what travels through the pipe.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError


@dataclass(frozen=True)
class Message:
    """Single chat turn: system, user, or assistant."""
    role: str
    content: str


@dataclass(frozen=True)
class GenerationRequest:
    """One streaming generation call. Built once per client request."""
    model: str
    messages: Tuple[Message, ...]
    stream: bool = True

    def __post_init__(self):
        # accept any sequence, store a tuple so the request stays immutable
        object.__setattr__(self, "messages", tuple(self.messages))
        if not self.messages:
            raise ValueError("GenerationRequest needs at least one message")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "stream": self.stream,
        }


# ------------------------------------------------------------
# Upstream wire format
# ------------------------------------------------------------
class EnvelopeMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str
    content: str


class GenerationEnvelope(BaseModel):
    """One decoded line of the upstream's NDJSON stream."""
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model: str
    created_at: str
    message: Optional[EnvelopeMessage] = None
    done: bool

    @property
    def content(self) -> Optional[str]:
        return self.message.content if self.message is not None else None


def parse_envelope(raw: Union[str, bytes]) -> Optional[GenerationEnvelope]:
    """Decode one chunk as a whole JSON document; None when it doesn't fit."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    raw = raw.strip()
    if not raw:
        return None
    try:
        return GenerationEnvelope.model_validate_json(raw)
    except ValidationError:
        return None


# ------------------------------------------------------------
# Relay messages
# ------------------------------------------------------------
@dataclass(frozen=True)
class DataFragment:
    text: str


@dataclass(frozen=True)
class StreamError:
    cause: BaseException = field(compare=False)


@dataclass(frozen=True)
class StreamEnd:
    pass


RelayMessage = Union[DataFragment, StreamError, StreamEnd]


def is_terminal(message: RelayMessage) -> bool:
    return isinstance(message, (StreamError, StreamEnd))
