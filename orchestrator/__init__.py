"""
Module 06 - Withdrawal Orchestrator (In-Process Runtime Wiring)

This module sequences deposits and withdrawals against an explicit PoolState
and hands authorized transfers to the host ledger.

Key features:
- Root, nullifier and proof checks before any state is touched
- Journaled commit: nullifier, event and transfer succeed or fail together
- Every attempt ends in a recorded state (COMMITTED or REJECTED)

Public API:
- ShieldedPool: Deposit/withdraw orchestrator
- create_pool: Build a pool from RuntimeConfig
- WithdrawalRequest / WithdrawalOutcome / WithdrawalState
- DepositOutcome / DepositState
- EventLog: In-memory Deposit/Withdrawal event log
- TransferExecutor: Host hook that performs transfers
"""

from orchestrator.pool import (
    DepositOutcome,
    DepositState,
    ShieldedPool,
    WithdrawalOutcome,
    WithdrawalRequest,
    WithdrawalState,
    create_pool,
)
from orchestrator.events import (
    EventLog,
    EventRecord,
    EventSink,
    generate_event_id,
)
from orchestrator.effects import (
    CrossChainInstruction,
    RecordingTransferExecutor,
    TransferEffect,
    TransferExecutor,
)

__all__ = [
    "DepositOutcome",
    "DepositState",
    "ShieldedPool",
    "WithdrawalOutcome",
    "WithdrawalRequest",
    "WithdrawalState",
    "create_pool",
    "EventLog",
    "EventRecord",
    "EventSink",
    "generate_event_id",
    "CrossChainInstruction",
    "RecordingTransferExecutor",
    "TransferEffect",
    "TransferExecutor",
]
