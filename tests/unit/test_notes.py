"""
Module 02 - Deposit Note Unit Tests
Tests for core/crypto/notes.py
"""
import pytest

from core.crypto.field import FIELD_MODULUS, is_field_element
from core.crypto.mimc import mimc_sponge
from core.crypto.notes import NOTE_PREFIX, Note

from fixtures.zk_fixtures import make_note


class TestDerivations:

    def test_commitment_hashes_nullifier_and_secret(self):
        note = Note(nullifier=11, secret=22)
        assert note.commitment == mimc_sponge((11, 22))

    def test_nullifier_hash_hides_secret(self):
        a = Note(nullifier=11, secret=22)
        b = Note(nullifier=11, secret=33)
        assert a.nullifier_hash == b.nullifier_hash
        assert a.commitment != b.commitment

    def test_nullifier_hash_differs_from_commitment(self, note):
        assert note.nullifier_hash != note.commitment


class TestGeneration:

    def test_generate_produces_field_elements(self):
        note = Note.generate()
        assert is_field_element(note.nullifier)
        assert is_field_element(note.secret)

    def test_generate_is_random(self):
        assert Note.generate() != Note.generate()

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="secret"):
            Note(nullifier=1, secret=FIELD_MODULUS)


class TestSerialization:

    def test_round_trip(self):
        note = make_note(7)
        encoded = note.to_string()
        assert encoded.startswith(NOTE_PREFIX + "-")
        assert Note.from_string(encoded) == note

    def test_rejects_wrong_prefix(self):
        with pytest.raises(ValueError, match="start with"):
            Note.from_string("other-note-0x00-0x00")

    def test_rejects_missing_element(self):
        encoded = make_note(1).to_string()
        truncated = encoded.rsplit("-", 1)[0]
        with pytest.raises(ValueError, match="two field elements"):
            Note.from_string(truncated)

    def test_repr_hides_secrets(self):
        note = make_note(2)
        text = repr(note)
        assert hex(note.secret)[2:] not in text
        assert "commitment" in text
