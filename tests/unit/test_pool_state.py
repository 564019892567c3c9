"""
Module 04 - Pool State Unit Tests
Tests for core/state/ (journal, ledger, nullifiers, pool_state)

Tests:
- Commitment ledger assignment, duplicates, capacity
- Nullifier registry permanence
- Transaction rollback restores ledger, tree and registry together
- Invariant violations halt the pool
- Snapshot round trip and tamper detection
"""
import pytest

from core.crypto.field import FIELD_MODULUS
from core.merkle import compute_root
from core.schemas.errors import (
    CommitmentAlreadyExistsException,
    NullifierAlreadySpentException,
    PoolFullException,
    PoolHaltedException,
    PoolInvariantViolation,
    SchemaValidationException,
)
from core.state import Journal, PoolState

from fixtures.common import TEST_DEPTH, make_commitment, make_pool_state


class TestJournal:

    def test_rollback_runs_newest_first(self):
        journal = Journal()
        calls = []
        journal.record(lambda: calls.append("first"))
        journal.record(lambda: calls.append("second"))
        assert journal.rollback() == 2
        assert calls == ["second", "first"]

    def test_commit_discards_actions(self):
        journal = Journal()
        calls = []
        journal.record(lambda: calls.append("x"))
        journal.commit()
        assert journal.closed
        assert len(journal) == 0
        assert calls == []

    def test_record_after_close_is_violation(self):
        journal = Journal()
        journal.commit()
        with pytest.raises(PoolInvariantViolation):
            journal.record(lambda: None)


class TestCommitmentLedger:

    def test_indices_are_dense_from_zero(self, pool_state):
        indices = [pool_state.ledger.insert(make_commitment(i)) for i in range(3)]
        assert indices == [0, 1, 2]
        assert pool_state.ledger.commitments() == [make_commitment(i) for i in range(3)]
        assert pool_state.ledger.leaf_index_of(make_commitment(1)) == 1

    def test_tree_tracks_ledger(self, pool_state):
        leaves = [make_commitment(i) for i in range(3)]
        for leaf in leaves:
            pool_state.ledger.insert(leaf)
        assert pool_state.current_root() == compute_root(leaves, TEST_DEPTH)
        assert pool_state.leaf_count() == len(pool_state.ledger) == 3

    def test_duplicate_rejected_without_change(self, pool_state):
        pool_state.ledger.insert(make_commitment(0))
        root = pool_state.current_root()
        with pytest.raises(CommitmentAlreadyExistsException) as exc_info:
            pool_state.ledger.insert(make_commitment(0))
        assert exc_info.value.details["leaf_index"] == 0
        assert pool_state.current_root() == root
        assert len(pool_state.ledger) == 1

    def test_non_field_commitment_rejected(self, pool_state):
        with pytest.raises(SchemaValidationException):
            pool_state.ledger.insert(FIELD_MODULUS)
        assert len(pool_state.ledger) == 0

    def test_pool_full(self):
        state = make_pool_state(depth=2)
        for i in range(4):
            state.ledger.insert(make_commitment(i))
        root = state.current_root()
        with pytest.raises(PoolFullException) as exc_info:
            state.ledger.insert(make_commitment(4))
        assert exc_info.value.details["capacity"] == 4
        assert state.current_root() == root


class TestNullifierRegistry:

    def test_mark_and_query(self, pool_state):
        assert not pool_state.is_spent(7)
        pool_state.nullifiers.mark_spent(7)
        assert pool_state.is_spent(7)
        assert 7 in pool_state.nullifiers

    def test_double_spend_rejected(self, pool_state):
        pool_state.nullifiers.mark_spent(7)
        with pytest.raises(NullifierAlreadySpentException):
            pool_state.nullifiers.mark_spent(7)
        assert pool_state.nullifiers.spent_count() == 1

    def test_insertion_order_preserved(self, pool_state):
        for n in (5, 3, 9):
            pool_state.nullifiers.mark_spent(n)
        assert list(pool_state.nullifiers) == [5, 3, 9]


class TestTransactions:

    def test_commit_keeps_changes(self, pool_state):
        with pool_state.transaction() as journal:
            pool_state.ledger.insert(make_commitment(0), journal)
            pool_state.nullifiers.mark_spent(11, journal)
        assert pool_state.leaf_count() == 1
        assert pool_state.is_spent(11)

    def test_failure_rolls_back_everything(self, pool_state):
        pool_state.ledger.insert(make_commitment(0))
        root = pool_state.current_root()
        history = pool_state.root_history()

        with pytest.raises(RuntimeError):
            with pool_state.transaction() as journal:
                pool_state.ledger.insert(make_commitment(1), journal)
                pool_state.nullifiers.mark_spent(11, journal)
                raise RuntimeError("effect failed")

        assert pool_state.current_root() == root
        assert pool_state.root_history() == history
        assert pool_state.leaf_count() == 1
        assert not pool_state.is_spent(11)
        assert not pool_state.ledger.contains(make_commitment(1))
        assert not pool_state.is_halted

    def test_rolled_back_index_is_reassigned(self, pool_state):
        with pytest.raises(RuntimeError):
            with pool_state.transaction() as journal:
                pool_state.ledger.insert(make_commitment(0), journal)
                raise RuntimeError("abort")
        assert pool_state.ledger.insert(make_commitment(1)) == 0

    def test_nested_transaction_rejected(self, pool_state):
        with pytest.raises(PoolInvariantViolation):
            with pool_state.transaction():
                with pool_state.transaction():
                    pass
        assert pool_state.is_halted

    def test_invariant_violation_halts(self, pool_state):
        with pytest.raises(PoolInvariantViolation):
            with pool_state.transaction() as journal:
                pool_state.tree.insert_leaf(5, make_commitment(0), journal)
        assert pool_state.is_halted
        assert "sequential" in pool_state.halted_reason
        with pytest.raises(PoolHaltedException):
            with pool_state.transaction():
                pass

    def test_reads_survive_halt(self, pool_state):
        pool_state.ledger.insert(make_commitment(0))
        pool_state.halt("test")
        assert pool_state.is_known_root(pool_state.current_root())
        assert pool_state.merkle_path(0).leaf == make_commitment(0)
        assert pool_state.stats()["halted"] is True


class TestSnapshots:

    def _populated(self) -> PoolState:
        state = make_pool_state()
        for i in range(5):
            state.ledger.insert(make_commitment(i))
        state.nullifiers.mark_spent(42)
        return state

    def test_round_trip(self):
        state = self._populated()
        restored = PoolState.from_snapshot(state.to_snapshot())
        assert restored.current_root() == state.current_root()
        assert restored.root_history() == state.root_history()
        assert restored.is_spent(42)
        assert restored.ledger.commitments() == state.ledger.commitments()

    def test_snapshot_is_canonical_dict(self):
        snapshot = self._populated().to_snapshot()
        assert snapshot["schema_version"] == "v1"
        assert snapshot["tree_depth"] == TEST_DEPTH
        assert "halted_reason" not in snapshot

    def test_tampered_history_detected(self):
        snapshot = self._populated().to_snapshot()
        snapshot["root_history"][-1] = 1
        with pytest.raises(PoolInvariantViolation, match="root history"):
            PoolState.from_snapshot(snapshot)

    def test_duplicate_nullifier_detected(self):
        snapshot = self._populated().to_snapshot()
        snapshot["nullifiers"] = [42, 42]
        with pytest.raises(PoolInvariantViolation) as exc_info:
            PoolState.from_snapshot(snapshot)
        assert exc_info.value.details["cause"] == "NULLIFIER_ALREADY_SPENT"

    def test_halt_reason_restored(self):
        state = self._populated()
        state.halt("desync")
        restored = PoolState.from_snapshot(state.to_snapshot())
        assert restored.halted_reason == "desync"
