# Persona store: reads a profile from a YAML or JSON file and caches it
# process-wide until invalidate() is called.

from __future__ import annotations
import json
import logging
import os
import threading
from typing import Any, Optional

import yaml

from persona_relay.errors import PersonaLoadError
from .types import PersonaProfile

logger = logging.getLogger(__name__)


class PersonaStore:
    def __init__(self, path: Optional[str], key: Optional[str] = None):
        self.path = path or None
        self.key = key or None
        self._cached: Optional[PersonaProfile] = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.path is not None

    # -------------------------
    # Public API
    # -------------------------
    def load(self) -> Optional[PersonaProfile]:
        """Return the current profile, reading the file on first use.

        None means personas are disabled. Raises PersonaLoadError when the
        file is missing or malformed.
        """
        if not self.enabled:
            return None
        cached = self._cached
        if cached is not None:
            return cached
        with self._lock:
            if self._cached is None:
                self._cached = self._read()
                logger.info("Loaded persona '%s' from %s", self._cached.name, self.path)
            return self._cached

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None

    def reload(self) -> Optional[PersonaProfile]:
        self.invalidate()
        return self.load()

    # -------------------------
    # Loaders
    # -------------------------
    def _read(self) -> PersonaProfile:
        if not os.path.exists(self.path):
            raise PersonaLoadError(f"Persona file not found: {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.endswith(".json"):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise PersonaLoadError(f"Cannot parse persona file {self.path}: {e}") from e
        return self._select(data)

    def _select(self, data: Any) -> PersonaProfile:
        if not isinstance(data, dict):
            raise PersonaLoadError(f"Persona file {self.path} must hold a mapping")
        # a single profile document carries its own name
        if isinstance(data.get("name"), str):
            return PersonaProfile.from_mapping(data, key=self.key or "")
        if self.key is None:
            raise PersonaLoadError(f"Persona file {self.path} holds several personas; set PERSONA_KEY")
        if self.key not in data:
            raise PersonaLoadError(f"Persona '{self.key}' not found in {self.path}")
        return PersonaProfile.from_mapping(data[self.key], key=self.key)
