# Persona augmenter: sprinkle a persona's voice over cleaned fragments.
#
# Order is fixed so a seeded random source gives reproducible output:
#   1) signature phrase insertion
#   2) sarcasm suffix
#   3) curiosity suffix

from __future__ import annotations
import random
import re
from typing import Optional

from .types import PersonaProfile

SIGNATURE_CHANCE = 0.3
SARCASM_THRESHOLD = 0.5
SARCASM_CHANCE = 0.5
CURIOSITY_THRESHOLD = 0.7
CURIOSITY_CHANCE = 0.4

SARCASTIC_SUFFIX = " ...or so they say."
CURIOSITY_SUFFIX = " Makes you wonder, doesn't it?"

_WORD = re.compile(r"\S+")


def augment(cleaned: str, profile: Optional[PersonaProfile], rng: random.Random) -> str:
    """
    Return ``cleaned`` with persona flourishes applied.

    Only ``rng.random``, ``rng.randint`` and ``rng.choice`` are used, and
    only when a rule is eligible, so a profile without phrases and with
    traits at or below the thresholds never touches the random source.
    """
    if profile is None or not cleaned:
        return cleaned

    text = cleaned
    if profile.signature_phrases and rng.random() < SIGNATURE_CHANCE:
        text = _insert_signature(text, profile, rng)

    if profile.trait("sarcasm") > SARCASM_THRESHOLD and rng.random() < SARCASM_CHANCE:
        text += SARCASTIC_SUFFIX

    if profile.trait("curiosity") > CURIOSITY_THRESHOLD and rng.random() < CURIOSITY_CHANCE:
        text += CURIOSITY_SUFFIX

    return text


def _insert_signature(text: str, profile: PersonaProfile, rng: random.Random) -> str:
    # splice at a word boundary so the fragment keeps its own spacing
    words = list(_WORD.finditer(text))
    if len(words) < 2:
        return text
    # never before the first word
    position = rng.randint(1, len(words) - 1)
    at = words[position].start()
    return f"{text[:at]}{rng.choice(profile.signature_phrases)} {text[at:]}"
