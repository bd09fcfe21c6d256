# Persona data model.

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from persona_relay.errors import PersonaLoadError


@dataclass(frozen=True)
class PersonaProfile:
    """Tone, trait intensities, constraints and catchphrases of a persona."""
    name: str
    traits: Mapping[str, float] = field(default_factory=dict)
    ethical_constraints: Tuple[str, ...] = ()
    default_tone: str = "neutral"
    signature_phrases: Tuple[str, ...] = ()
    key: str = ""

    def __post_init__(self):
        # frozen + read-only mapping: profiles are shared across requests
        object.__setattr__(self, "traits", MappingProxyType(dict(self.traits)))
        object.__setattr__(self, "ethical_constraints", tuple(self.ethical_constraints))
        object.__setattr__(self, "signature_phrases", tuple(self.signature_phrases))

    def trait(self, name: str) -> float:
        """Intensity of a trait; a missing trait counts as 0."""
        return float(self.traits.get(name, 0.0))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], key: str = "") -> "PersonaProfile":
        if not isinstance(data, Mapping):
            raise PersonaLoadError(f"Persona '{key}' must be a mapping, got {type(data).__name__}")

        raw_traits = data.get("traits") or {}
        if not isinstance(raw_traits, Mapping):
            raise PersonaLoadError(f"Persona '{key}': traits must be a mapping")
        traits: Dict[str, float] = {}
        for trait_name, value in raw_traits.items():
            try:
                intensity = float(value)
            except (TypeError, ValueError):
                raise PersonaLoadError(f"Persona '{key}': trait '{trait_name}' is not a number") from None
            if not 0.0 <= intensity <= 1.0:
                raise PersonaLoadError(f"Persona '{key}': trait '{trait_name}'={intensity} outside [0, 1]")
            traits[str(trait_name)] = intensity

        return cls(
            key=key,
            name=str(data.get("name") or key or "assistant"),
            traits=traits,
            ethical_constraints=_str_list(data.get("ethical_constraints"), "ethical_constraints", key),
            default_tone=str(data.get("default_tone") or "neutral"),
            signature_phrases=_str_list(data.get("signature_phrases"), "signature_phrases", key),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "traits": dict(self.traits),
            "ethical_constraints": list(self.ethical_constraints),
            "default_tone": self.default_tone,
            "signature_phrases": list(self.signature_phrases),
        }


def _str_list(value: Any, field_name: str, key: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise PersonaLoadError(f"Persona '{key}': {field_name} must be a list of strings")
    return tuple(str(v) for v in value if str(v).strip())
