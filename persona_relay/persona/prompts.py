# Prompt templates for persona-flavoured requests.

from __future__ import annotations
from typing import Optional

from .types import PersonaProfile

BASE_GUARDRAILS = """\
Stay in character. Never break the ethical constraints listed above.
"""


def build_persona_prompt(profile: Optional[PersonaProfile], user_text: str) -> str:
    """Prefix the user's text with a structured persona header."""
    if profile is None:
        return user_text

    traits = ", ".join(
        f"{name} {round(value * 100)}%" for name, value in sorted(profile.traits.items())
    ) or "none"
    constraints = "\n".join(f"- {c}" for c in profile.ethical_constraints) or "- none"
    phrases = ", ".join(f'"{p}"' for p in profile.signature_phrases) or "none"

    return f"""[PERSONA]
Name: {profile.name}
Tone: {profile.default_tone}
Traits: {traits}
Ethical constraints:
{constraints}
Signature phrases: {phrases}
{BASE_GUARDRAILS}[/PERSONA]

User: {user_text}"""
