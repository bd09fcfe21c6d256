# Prompt policy: a persona's ethical constraints double as a block list.

from __future__ import annotations
from typing import Optional

from .types import PersonaProfile


def find_violation(prompt: str, profile: Optional[PersonaProfile]) -> Optional[str]:
    """Return the first constraint phrase found in the prompt (case-insensitive)."""
    if profile is None or not prompt:
        return None
    lowered = prompt.lower()
    for phrase in profile.ethical_constraints:
        if phrase.lower() in lowered:
            return phrase
    return None
