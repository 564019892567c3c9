"""
Module 06 - Withdrawal Orchestrator

Sequences deposits and withdrawals against an explicit PoolState.

Withdrawal state machine:

    RECEIVED -> ROOT_CHECKED -> NULLIFIER_CHECKED -> PROOF_VERIFIED -> COMMITTED

Any check failing moves the attempt to REJECTED.

Checks 1-3 only read state (the tree's published view, the registry, the
pure verifier) and run without the pool lock, so the pairing check does not
stall deposits. The commit step runs inside one PoolState transaction that
re-checks the root window and the nullifier, marks the nullifier spent,
emits the Withdrawal event and hands the transfer to the executor. If any of
those raise, the journal undoes the others.

Deposit admission is RECEIVED -> INSERTED or REJECTED.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from core.config.runtime import RuntimeConfig
from core.crypto.field import field_to_hex
from core.merkle.merkle_tree import MerkleProof
from core.schemas.errors import (
    DepositError,
    InvalidRootException,
    MalformedPublicInputsException,
    NullifierAlreadySpentException,
    PoolException,
    ProofVerificationFailedException,
    WithdrawError,
)
from core.schemas.pool import (
    Asset,
    DepositEvent,
    DepositReceipt,
    WithdrawalEvent,
    WithdrawalReceipt,
)
from core.state.pool_state import PoolState
from core.zk.encoding import decode_proof, load_verifying_key, proof_from_dict
from core.zk.groth16 import Proof, ProofVerifier, VerifyingKey
from core.zk.public_inputs import PublicInputs

from orchestrator.effects import (
    CrossChainInstruction,
    RecordingTransferExecutor,
    TransferEffect,
    TransferExecutor,
)
from orchestrator.events import EventLog, EventSink


logger = logging.getLogger(__name__)


# =============================================================================
# States and results
# =============================================================================

class WithdrawalState(str, Enum):
    RECEIVED = "received"
    ROOT_CHECKED = "root_checked"
    NULLIFIER_CHECKED = "nullifier_checked"
    PROOF_VERIFIED = "proof_verified"
    COMMITTED = "committed"
    REJECTED = "rejected"


class DepositState(str, Enum):
    RECEIVED = "received"
    INSERTED = "inserted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class WithdrawalRequest:
    """
    Everything a relayer submits for one withdrawal.

    `proof` is the 256-byte encoding, snarkjs proof.json content, or an
    already decoded Proof. Decoding happens during the proof check, after
    the root and nullifier checks.
    """
    proof: Union[bytes, dict, Proof]
    root: int
    nullifier_hash: int
    recipient: str
    fee: int
    relayer: str
    refund: int = 0
    destination_chain_hash: Optional[int] = None


@dataclass
class WithdrawalOutcome:
    """Final state of one withdrawal attempt."""
    state: WithdrawalState = WithdrawalState.RECEIVED
    receipt: Optional[WithdrawalReceipt] = None
    error: Optional[WithdrawError] = None
    rejected_at: Optional[WithdrawalState] = None

    @property
    def ok(self) -> bool:
        return self.state == WithdrawalState.COMMITTED

    def advance(self, state: WithdrawalState) -> None:
        self.state = state

    def reject(self, error: WithdrawError) -> None:
        self.rejected_at = self.state
        self.state = WithdrawalState.REJECTED
        self.error = error

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "state": self.state.value,
            "rejected_at": self.rejected_at.value if self.rejected_at else None,
            "error": self.error.to_error_model().model_dump() if self.error else None,
            "receipt": self.receipt.model_dump() if self.receipt else None,
        }


@dataclass
class DepositOutcome:
    state: DepositState = DepositState.RECEIVED
    receipt: Optional[DepositReceipt] = None
    error: Optional[DepositError] = None

    @property
    def ok(self) -> bool:
        return self.state == DepositState.INSERTED


# =============================================================================
# Orchestrator
# =============================================================================

class ShieldedPool:
    """
    Fixed-denomination shielded pool.

    Owns no state of its own beyond wiring: the PoolState, verifier, event
    sink and transfer executor are all passed in.
    """

    def __init__(
        self,
        state: PoolState,
        verifier: ProofVerifier,
        denomination: int,
        asset: Optional[Asset] = None,
        events: Optional[EventSink] = None,
        executor: Optional[TransferExecutor] = None,
    ) -> None:
        if denomination <= 0:
            raise ValueError("Denomination must be positive")
        self.state = state
        self.verifier = verifier
        self.denomination = denomination
        self.asset = asset or Asset()
        self.events = events if events is not None else EventLog()
        self.executor = executor if executor is not None else RecordingTransferExecutor()

    # -------------------------------------------------------------------------
    # Deposits
    # -------------------------------------------------------------------------

    def process_deposit(self, commitment: int) -> DepositOutcome:
        """
        Admit a deposit, reporting rejections in the outcome.

        Fatal errors (halted pool, invariant violation) still raise.
        """
        outcome = DepositOutcome()
        try:
            with self.state.transaction() as journal:
                leaf_index = self.state.ledger.insert(commitment, journal)
                new_root = self.state.current_root()
                self.events.emit(
                    DepositEvent(commitment=commitment, leaf_index=leaf_index, new_root=new_root),
                    journal,
                )
        except DepositError as e:
            outcome.state = DepositState.REJECTED
            outcome.error = e
            logger.warning("Deposit rejected: %s (%s)", e.message, e.code)
            return outcome

        outcome.state = DepositState.INSERTED
        outcome.receipt = DepositReceipt(leaf_index=leaf_index, new_root=new_root)
        logger.info("Deposit inserted at leaf %d, new root %s", leaf_index, field_to_hex(new_root))
        return outcome

    def deposit(self, commitment: int) -> DepositReceipt:
        """
        Insert a commitment as the next leaf.

        Raises:
            PoolFullException: If the tree is at capacity
            CommitmentAlreadyExistsException: If the commitment was deposited before
            PoolHaltedException: If the pool has halted
        """
        outcome = self.process_deposit(commitment)
        if outcome.error is not None:
            raise outcome.error
        return outcome.receipt

    # -------------------------------------------------------------------------
    # Withdrawals
    # -------------------------------------------------------------------------

    def process_withdrawal(self, request: WithdrawalRequest) -> WithdrawalOutcome:
        """
        Run one withdrawal through the state machine.

        Recoverable rejections are reported in the outcome with no state
        change. Halting, invariant violations and executor failures raise
        after the transaction has rolled back.
        """
        outcome = WithdrawalOutcome()
        self.state.ensure_not_halted()

        try:
            self._check_root(request)
            outcome.advance(WithdrawalState.ROOT_CHECKED)

            self._check_nullifier(request)
            outcome.advance(WithdrawalState.NULLIFIER_CHECKED)

            self._check_proof(request)
            outcome.advance(WithdrawalState.PROOF_VERIFIED)

            receipt = self._commit(request)
        except WithdrawError as e:
            outcome.reject(e)
            logger.warning(
                "Withdrawal rejected at %s: %s (%s)",
                outcome.rejected_at.value, e.message, e.code,
            )
            return outcome

        outcome.receipt = receipt
        outcome.advance(WithdrawalState.COMMITTED)
        logger.info(
            "Withdrawal committed: %d to %s, fee %d to %s",
            receipt.amount, receipt.recipient, receipt.fee, receipt.relayer,
        )
        return outcome

    def withdraw(
        self,
        proof: Union[bytes, dict, Proof],
        root: int,
        nullifier_hash: int,
        recipient: str,
        fee: int,
        relayer: str,
        destination_chain_hash: Optional[int] = None,
        refund: int = 0,
    ) -> WithdrawalReceipt:
        """
        Withdraw one denomination to `recipient`.

        Raises:
            InvalidRootException: Root not in the retained history
            NullifierAlreadySpentException: Nullifier already used
            ProofVerificationFailedException: Proof does not verify or decode
            MalformedPublicInputsException: Inputs do not fit the circuit
            PoolHaltedException: The pool has halted
        """
        outcome = self.process_withdrawal(
            WithdrawalRequest(
                proof=proof,
                root=root,
                nullifier_hash=nullifier_hash,
                recipient=recipient,
                fee=fee,
                relayer=relayer,
                refund=refund,
                destination_chain_hash=destination_chain_hash,
            )
        )
        if outcome.error is not None:
            raise outcome.error
        return outcome.receipt

    def _check_root(self, request: WithdrawalRequest) -> None:
        if not self.state.is_known_root(request.root):
            raise InvalidRootException(details={"root": hex(request.root)})

    def _check_nullifier(self, request: WithdrawalRequest) -> None:
        if self.state.is_spent(request.nullifier_hash):
            raise NullifierAlreadySpentException(
                details={"nullifier_hash": hex(request.nullifier_hash)}
            )

    def _check_proof(self, request: WithdrawalRequest) -> None:
        if not request.recipient or not request.relayer:
            raise MalformedPublicInputsException(
                "Recipient and relayer must be non-empty identifiers",
            )
        inputs = PublicInputs.for_withdrawal(
            root=request.root,
            nullifier_hash=request.nullifier_hash,
            recipient=request.recipient,
            fee=request.fee,
            relayer=request.relayer,
            refund=request.refund,
            destination_chain_hash=request.destination_chain_hash,
        )
        self._check_amounts(request)

        if not self.verifier.verify(self._decode_proof(request.proof), inputs.to_vector()):
            raise ProofVerificationFailedException()

    @staticmethod
    def _decode_proof(proof: Union[bytes, dict, Proof]) -> Proof:
        if isinstance(proof, Proof):
            return proof
        if isinstance(proof, dict):
            return proof_from_dict(proof)
        return decode_proof(proof)

    def _check_amounts(self, request: WithdrawalRequest) -> None:
        if request.fee > self.denomination:
            raise MalformedPublicInputsException(
                "Fee exceeds the pool denomination",
                field_path="fee",
                details={"fee": request.fee, "denomination": self.denomination},
            )
        if request.refund and self.asset.is_native:
            raise MalformedPublicInputsException(
                "Refund must be zero for a native-asset pool",
                field_path="refund",
            )

    def _commit(self, request: WithdrawalRequest) -> WithdrawalReceipt:
        amount = self.denomination - request.fee
        cross_chain = None
        if request.destination_chain_hash is not None:
            cross_chain = CrossChainInstruction(
                destination_chain_hash=request.destination_chain_hash,
                beneficiary=request.recipient,
                asset=self.asset,
                amount=amount,
            )
        effect = TransferEffect(
            asset=self.asset,
            recipient=request.recipient,
            amount=amount,
            relayer=request.relayer,
            fee=request.fee,
            refund=request.refund,
            cross_chain=cross_chain,
        )

        try:
            with self.state.transaction() as journal:
                # Root and nullifier are re-checked under the lock: concurrent
                # deposits may have rotated the root out of the window, and a
                # concurrent withdrawal may have spent the nullifier
                self._check_root(request)
                self.state.nullifiers.mark_spent(request.nullifier_hash, journal)
                self.events.emit(
                    WithdrawalEvent(
                        nullifier_hash=request.nullifier_hash,
                        recipient=request.recipient,
                        relayer=request.relayer,
                        fee=request.fee,
                        refund=request.refund,
                        amount=amount,
                        destination_chain_hash=request.destination_chain_hash,
                    ),
                    journal,
                )
                self.executor.execute(effect)
        except PoolException:
            raise
        except Exception:
            logger.exception("Transfer failed; withdrawal rolled back")
            raise

        return WithdrawalReceipt(
            recipient=request.recipient,
            amount=amount,
            relayer=request.relayer,
            fee=request.fee,
            refund=request.refund,
            nullifier_hash=request.nullifier_hash,
            destination_chain_hash=request.destination_chain_hash,
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def current_root(self) -> int:
        return self.state.current_root()

    def root_history(self) -> tuple[int, ...]:
        return self.state.root_history()

    def is_spent(self, nullifier_hash: int) -> bool:
        return self.state.is_spent(nullifier_hash)

    def merkle_path(self, leaf_index: int) -> MerkleProof:
        return self.state.merkle_path(leaf_index)


# =============================================================================
# Factory Functions
# =============================================================================

def create_pool(
    config: Optional[RuntimeConfig] = None,
    *,
    verifying_key: Optional[VerifyingKey] = None,
    state: Optional[PoolState] = None,
    events: Optional[EventSink] = None,
    executor: Optional[TransferExecutor] = None,
) -> ShieldedPool:
    """
    Build a pool from runtime configuration.

    Args:
        config: Runtime configuration (defaults to RuntimeConfig())
        verifying_key: Overrides config.verifier.verifying_key_path
        state: Existing state (e.g. restored from a snapshot); genesis if None
        events: Event sink (in-memory EventLog if None)
        executor: Transfer executor (recording executor if None)

    Raises:
        ValueError: If no verifying key is given or configured, or if the
            given state's shape disagrees with the config
    """
    config = config or RuntimeConfig()

    if verifying_key is None:
        path = config.verifier.verifying_key_path
        if not path:
            raise ValueError("No verifying key configured (set SHIELDED_POOL_VERIFYING_KEY)")
        verifying_key = load_verifying_key(path)

    if state is None:
        state = PoolState(depth=config.tree.depth, history_size=config.tree.root_history_size)
    elif state.depth != config.tree.depth:
        raise ValueError(
            f"State depth {state.depth} does not match configured depth {config.tree.depth}"
        )

    logger.info(
        "Pool ready: depth %d, history %d, denomination %d, %d public inputs",
        state.depth, state.history_size, config.pool.denomination,
        verifying_key.num_public_inputs,
    )
    return ShieldedPool(
        state=state,
        verifier=ProofVerifier(verifying_key),
        denomination=config.pool.denomination,
        asset=config.pool.asset(),
        events=events,
        executor=executor,
    )


__all__ = [
    "WithdrawalState",
    "DepositState",
    "WithdrawalRequest",
    "WithdrawalOutcome",
    "DepositOutcome",
    "ShieldedPool",
    "create_pool",
]
