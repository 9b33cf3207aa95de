from __future__ import annotations

import pytest

from tortilla import invariants
from tortilla.exceptions import NeverThrown


def test_never_raises_never_thrown_with_payload() -> None:
    with pytest.raises(NeverThrown) as excinfo:
        invariants.never("boom", arity=3)
    assert excinfo.value.payload == {"reason": "boom", "env": {"arity": "3"}}


def test_never_has_default_reason() -> None:
    with pytest.raises(NeverThrown, match="never\\(\\) marker reached"):
        invariants.never()


def test_proof_mode_defaults_off() -> None:
    assert not invariants.proof_mode()


def test_proof_mode_scope_nests_and_restores() -> None:
    with invariants.proof_mode_scope(True):
        assert invariants.proof_mode()
        with invariants.proof_mode_scope(False):
            assert not invariants.proof_mode()
        assert invariants.proof_mode()
    assert not invariants.proof_mode()
