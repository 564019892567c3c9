"""
Module 02 - Deposit Notes
Client-side secrets behind a commitment and its nullifier.

Owner: Protocol/Crypto Engineer
Module ID: M02

A note holds two random field elements:
- nullifier: revealed only through nullifier_hash at withdrawal
- secret: never revealed

Derivations (must match the withdrawal circuit):
- commitment     = MiMC(nullifier, secret)
- nullifier_hash = MiMC(nullifier)

The pool never sees a note. This module exists so wallets, relayers and
tests derive commitments and nullifier hashes exactly as the circuit does.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass

from core.crypto.field import FIELD_MODULUS, field_from_hex, field_to_hex, require_field_element
from core.crypto.mimc import mimc_sponge


NOTE_PREFIX = "shielded-note-v1"


@dataclass(frozen=True)
class Note:
    """The secret pair behind one deposit."""
    nullifier: int
    secret: int

    def __post_init__(self) -> None:
        require_field_element(self.nullifier, "nullifier")
        require_field_element(self.secret, "secret")

    @classmethod
    def generate(cls) -> "Note":
        """Draw a fresh note from the OS CSPRNG."""
        return cls(
            nullifier=secrets.randbelow(FIELD_MODULUS),
            secret=secrets.randbelow(FIELD_MODULUS),
        )

    @property
    def commitment(self) -> int:
        return mimc_sponge((self.nullifier, self.secret))

    @property
    def nullifier_hash(self) -> int:
        return mimc_sponge((self.nullifier,))

    def to_string(self) -> str:
        """Serialize as 'shielded-note-v1-<nullifier hex>-<secret hex>'."""
        return f"{NOTE_PREFIX}-{field_to_hex(self.nullifier)}-{field_to_hex(self.secret)}"

    @classmethod
    def from_string(cls, value: str) -> "Note":
        """
        Parse a note produced by to_string().

        Raises:
            ValueError: If the prefix or either element is malformed
        """
        prefix = NOTE_PREFIX + "-"
        if not value.startswith(prefix):
            raise ValueError(f"Note must start with '{prefix}'")
        parts = value[len(prefix):].split("-")
        if len(parts) != 2:
            raise ValueError("Note must contain exactly two field elements")
        return cls(nullifier=field_from_hex(parts[0]), secret=field_from_hex(parts[1]))

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return f"Note(commitment={field_to_hex(self.commitment)})"


__all__ = ["Note", "NOTE_PREFIX"]
