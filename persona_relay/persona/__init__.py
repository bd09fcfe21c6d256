# Persona package
# Profiles, their store, the prompt policy check and the output augmenter.

from .types import PersonaProfile
from .store import PersonaStore
from .policy import find_violation
from .prompts import build_persona_prompt
from .augmenter import augment

__all__ = ["PersonaProfile", "PersonaStore", "find_violation", "build_persona_prompt", "augment"]
