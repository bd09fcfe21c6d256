# ===============================================
# tests/test_augmenter.py
# Persona flourishes with injectable randomness.
# ===============================================

import random

import pytest

from persona_relay.persona import PersonaProfile, augment
from persona_relay.persona.augmenter import CURIOSITY_SUFFIX, SARCASTIC_SUFFIX
from conftest import AlwaysRng, ForbiddenRng


def test_no_profile_is_identity():
    assert augment("hello world", None, ForbiddenRng()) == "hello world"


@pytest.mark.parametrize("text", ["", "one", "two words", "  padded  text ", "a b c d e f"])
def test_zero_traits_no_phrases_is_identity(text):
    quiet = PersonaProfile(name="Quiet", traits={"sarcasm": 0.0, "curiosity": 0.0})
    assert augment(text, quiet, ForbiddenRng()) == text
    for seed in range(5):
        assert augment(text, quiet, random.Random(seed)) == text


def test_missing_traits_never_fire():
    bare = PersonaProfile(name="Bare")
    assert bare.trait("sarcasm") == 0.0
    assert augment("some text here", bare, AlwaysRng()) == "some text here"


def test_sarcasm_appended_once():
    snarky = PersonaProfile(name="Snark", traits={"sarcasm": 1.0})
    out = augment("Great idea", snarky, AlwaysRng())
    assert out == "Great idea" + SARCASTIC_SUFFIX
    assert out.count(SARCASTIC_SUFFIX) == 1


def test_sarcasm_threshold_is_exclusive():
    borderline = PersonaProfile(name="Edge", traits={"sarcasm": 0.5})
    assert augment("Great idea", borderline, AlwaysRng()) == "Great idea"


def test_curiosity_appended_after_sarcasm():
    both = PersonaProfile(name="Both", traits={"sarcasm": 0.9, "curiosity": 0.9})
    out = augment("Sure", both, AlwaysRng())
    assert out == "Sure" + SARCASTIC_SUFFIX + CURIOSITY_SUFFIX


def test_curiosity_threshold():
    mild = PersonaProfile(name="Mild", traits={"curiosity": 0.7})
    assert augment("Sure", mild, AlwaysRng()) == "Sure"


def test_signature_never_first_word():
    sig = PersonaProfile(name="Sig", signature_phrases=["indeed,"])
    out = augment("alpha beta gamma", sig, AlwaysRng())
    assert out.split()[0] == "alpha"
    assert "indeed," in out.split()[1:]

    for seed in range(50):
        words = augment("alpha beta gamma", sig, random.Random(seed)).split()
        assert words[0] == "alpha"
        assert [w for w in words if w != "indeed,"] == ["alpha", "beta", "gamma"]


def test_signature_skipped_for_single_word():
    sig = PersonaProfile(name="Sig", signature_phrases=["indeed,"])
    assert augment("alone", sig, AlwaysRng()) == "alone"


def test_reproducible_with_seed():
    profile = PersonaProfile(
        name="Mixed",
        traits={"sarcasm": 0.8, "curiosity": 0.9},
        signature_phrases=["well,", "you see,"],
    )
    text = "the quick brown fox jumps"
    first = [augment(text, profile, random.Random(42)) for _ in range(3)]
    assert len(set(first)) == 1


def test_signature_keeps_fragment_spacing():
    sig = PersonaProfile(name="Sig", signature_phrases=["indeed,"])
    assert augment("  alpha  beta ", sig, AlwaysRng()) == "  alpha  indeed, beta "
    for seed in range(50):
        out = augment(" alpha beta gamma ", sig, random.Random(seed))
        assert out.startswith(" alpha ")
        assert out.endswith(" ")
        assert out.replace("indeed, ", "") == " alpha beta gamma "
