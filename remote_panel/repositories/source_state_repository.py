"""
remote_panel/repositories/source_state_repository.py

Storage for per-source sync state shared by concurrent sync units and readers.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from remote_panel.domain.call_record import CallRecord
from remote_panel.domain.sync import SourceSyncPhase, SourceSyncState, SyncError


class SourceStateRepository(Protocol):
    def get(self, source_name: str) -> SourceSyncState:
        ...

    def set(self, state: SourceSyncState) -> None:
        ...

    def all_states(self) -> dict[str, SourceSyncState]:
        ...

    def mark_fetching(self, source_name: str, *, attempted_at: datetime) -> SourceSyncState:
        ...

    def replace_records(
        self,
        source_name: str,
        records: Iterable[CallRecord],
        *,
        synced_at: datetime,
        missing_columns: tuple[str, ...] = (),
    ) -> SourceSyncState:
        ...

    def record_failure(self, error: SyncError, *, failed_at: datetime) -> SourceSyncState:
        ...

    def total_record_count(self) -> int:
        ...


class InMemorySourceStateRepository:
    """
    Lock-guarded in-process map of source name to SourceSyncState.

    States are immutable; every write swaps in a whole new value so each
    critical section is acquire, replace, release.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: dict[str, SourceSyncState] = {}

    def get(self, source_name: str) -> SourceSyncState:
        with self._lock:
            return self._states.get(source_name) or SourceSyncState(source_name=source_name)

    def set(self, state: SourceSyncState) -> None:
        with self._lock:
            self._states[state.source_name] = state

    def all_states(self) -> dict[str, SourceSyncState]:
        with self._lock:
            return dict(self._states)

    def mark_fetching(self, source_name: str, *, attempted_at: datetime) -> SourceSyncState:
        with self._lock:
            current = self._states.get(source_name) or SourceSyncState(source_name=source_name)
            updated = replace(
                current,
                phase=SourceSyncPhase.FETCHING,
                last_attempt_time=attempted_at,
            )
            self._states[source_name] = updated
            return updated

    def replace_records(
        self,
        source_name: str,
        records: Iterable[CallRecord],
        *,
        synced_at: datetime,
        missing_columns: tuple[str, ...] = (),
    ) -> SourceSyncState:
        cached = tuple(records)
        with self._lock:
            current = self._states.get(source_name) or SourceSyncState(source_name=source_name)
            updated = replace(
                current,
                phase=SourceSyncPhase.SUCCESS,
                last_sync_time=synced_at,
                cached_records=cached,
                consecutive_failures=0,
                last_error=None,
                last_error_kind=None,
                missing_columns=missing_columns,
            )
            self._states[source_name] = updated
            return updated

    def record_failure(self, error: SyncError, *, failed_at: datetime) -> SourceSyncState:
        with self._lock:
            current = self._states.get(error.source_name) or SourceSyncState(
                source_name=error.source_name
            )
            # Previously cached records stay readable until the next successful sync.
            updated = replace(
                current,
                phase=SourceSyncPhase.FAILED,
                last_attempt_time=failed_at,
                consecutive_failures=current.consecutive_failures + 1,
                last_error=error.message,
                last_error_kind=error.error_kind,
            )
            self._states[error.source_name] = updated
            return updated

    def total_record_count(self) -> int:
        with self._lock:
            return sum(len(state.cached_records) for state in self._states.values())
