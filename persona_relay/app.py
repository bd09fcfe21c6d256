# ============================================================
# Persona Relay FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - GET /chat streams a cleaned, persona-flavoured reply
#   - Persona store with explicit reload
#   - Support for Ollama or Echo streaming clients
# ============================================================

import logging
import os
import random
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, StreamingResponse

# --- Local imports ---
from persona_relay import __version__
from persona_relay.errors import PersonaLoadError
from persona_relay.settings import settings
from persona_relay.persona import PersonaStore, find_violation
from persona_relay.generate import StreamingChatGenerator, RelayStream, EchoDevClient
from persona_relay.generate.clients.ollama_client import OllamaStreamClient

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"


class RelayResponse(StreamingResponse):
    """Streams a relay body and releases its producer however the response ends."""

    def __init__(self, stream: RelayStream):
        super().__init__(stream.iter_text(), media_type=STREAM_MEDIA_TYPE)
        self.relay = stream

    async def __call__(self, scope, receive, send):
        try:
            await super().__call__(scope, receive, send)
        finally:
            # the body iterator never runs if the client left before the first send
            await self.relay.aclose()


# ------------------------------------------------------------
# 🔧 Dependencies (overridable in tests)
# ------------------------------------------------------------
@lru_cache(maxsize=1)
def get_model_client():
    if settings.UPSTREAM_ENGINE == "echo":
        return EchoDevClient()
    return OllamaStreamClient(
        url=settings.chat_url,
        model=settings.OLLAMA_MODEL,
        connect_timeout=settings.UPSTREAM_CONNECT_TIMEOUT,
        read_timeout=settings.UPSTREAM_READ_TIMEOUT,
        line_framing=settings.UPSTREAM_LINE_FRAMING,
    )


@lru_cache(maxsize=1)
def get_persona_store() -> PersonaStore:
    return PersonaStore(settings.PERSONA_PATH, settings.PERSONA_KEY)


def get_rng() -> random.Random:
    # private per request
    return random.Random(settings.AUGMENT_SEED)


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title=settings.APP_NAME, version=__version__)


# ------------------------------------------------------------
# 💬 Main chat route
# ------------------------------------------------------------
@app.get("/chat")
async def chat(
    prompt: Optional[str] = Query(None, description="User prompt"),
    store: PersonaStore = Depends(get_persona_store),
    model_client=Depends(get_model_client),
    rng: random.Random = Depends(get_rng),
):
    prompt = prompt or settings.DEFAULT_PROMPT
    logger.info("Chat request: %r", prompt)

    # --- 1) Persona ---
    try:
        persona = store.load()
    except PersonaLoadError as e:
        logger.error("Persona load failed: %s", e)
        return PlainTextResponse(f"Persona configuration error: {e}", status_code=500)

    # --- 2) Policy check, before any upstream traffic ---
    violation = find_violation(prompt, persona)
    if violation is not None:
        logger.warning("Refused prompt matching constraint %r", violation)
        return PlainTextResponse("Sorry, I can't help with that request.", status_code=403)

    # --- 3) Start relay ---
    gen = StreamingChatGenerator(
        model_client=model_client,
        persona=persona,
        rng=rng,
        capacity=settings.RELAY_CAPACITY,
    )
    model = getattr(model_client, "model", None) or settings.OLLAMA_MODEL
    stream = await gen.open(gen.build_request(model, prompt))

    # --- 4) Connect-time failure: no body text ---
    if stream.error is not None:
        await stream.aclose()
        return PlainTextResponse(f"Upstream unavailable: {stream.error}", status_code=502)

    return RelayResponse(stream)


# ------------------------------------------------------------
# 🎭 Persona inspection / reload
# ------------------------------------------------------------
@app.get("/persona")
def persona_info(store: PersonaStore = Depends(get_persona_store)):
    try:
        persona = store.load()
    except PersonaLoadError as e:
        return PlainTextResponse(f"Persona configuration error: {e}", status_code=500)
    return {"persona": persona.to_dict() if persona else None}


@app.post("/persona/reload")
def persona_reload(store: PersonaStore = Depends(get_persona_store)):
    try:
        persona = store.reload()
    except PersonaLoadError as e:
        logger.error("Persona reload failed: %s", e)
        return PlainTextResponse(f"Persona configuration error: {e}", status_code=500)
    return {"reloaded": True, "persona": persona.to_dict() if persona else None}


# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz(model_client=Depends(get_model_client)):
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
        "engine": type(model_client).__name__,
        "model": getattr(model_client, "model", None),
    }


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}


# ------------------------------------------------------------
# 🏠 Landing page
# ------------------------------------------------------------
@app.get("/")
def index():
    if not os.path.exists(settings.INDEX_PATH):
        return PlainTextResponse("index.html not found", status_code=404)
    with open(settings.INDEX_PATH, "r", encoding="utf-8") as f:
        return HTMLResponse(f.read())
