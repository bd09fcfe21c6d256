# persona_relay/settings.py
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Persona Relay")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # dev server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # upstream
    UPSTREAM_ENGINE: Literal["ollama", "echo"] = Field(default="ollama")
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_CHAT_PATH: str = Field(default="/api/chat")
    OLLAMA_MODEL: str = Field(default="mistral")
    UPSTREAM_CONNECT_TIMEOUT: float = Field(default=10.0)
    # idle timeout between upstream reads; None waits forever
    UPSTREAM_READ_TIMEOUT: Optional[float] = Field(default=None)
    UPSTREAM_LINE_FRAMING: bool = Field(default=False)

    # relay
    RELAY_CAPACITY: int = Field(default=20, ge=1)
    DEFAULT_PROMPT: str = Field(default="Hello")
    AUGMENT_SEED: Optional[int] = Field(default=None)

    # persona; an empty path disables personas entirely
    PERSONA_PATH: str = Field(default=str(PACKAGE_DIR / "persona" / "personas.yaml"))
    PERSONA_KEY: Optional[str] = Field(default="default")

    # landing page
    INDEX_PATH: str = Field(default=str(PACKAGE_DIR / "static" / "index.html"))

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME

    @property
    def chat_url(self) -> str:
        return self.OLLAMA_HOST.rstrip("/") + self.OLLAMA_CHAT_PATH


settings = Settings()
