"""
botshield Threat Ledger

Per-client accumulated risk. Storage is pluggable through LedgerBackend
(in-memory by default; use an external keyed store in production so
risk survives process restarts). Read-modify-write of a single
identity's record is serialized with a per-identity lock; different
identities never contend.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from botshield.models import ThreatRecord

logger = logging.getLogger(__name__)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# =============================================================================
# Storage backends
# =============================================================================

class LedgerBackend(ABC):
    """Keyed storage for ThreatRecords."""

    @abstractmethod
    def get(self, identity: str) -> Optional[ThreatRecord]:
        """Return a copy of the stored record, or None."""

    @abstractmethod
    def set(self, record: ThreatRecord) -> None:
        """Store the record under record.identity."""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryBackend(LedgerBackend):
    """Process-lifetime dict storage. Lost when the process restarts."""

    def __init__(self):
        self.records: Dict[str, ThreatRecord] = {}

    def get(self, identity: str) -> Optional[ThreatRecord]:
        record = self.records.get(identity)
        return record.copy() if record else None

    def set(self, record: ThreatRecord) -> None:
        self.records[record.identity] = record.copy()

    def __len__(self) -> int:
        return len(self.records)


# =============================================================================
# Ledger
# =============================================================================

class ThreatLedger:
    def __init__(
        self,
        backend: Optional[LedgerBackend] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend if backend is not None else InMemoryBackend()
        self.clock = clock
        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, identity: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[identity]

    def preload(self, known: Mapping[str, Tuple[float, Iterable[str]]]) -> None:
        """Seed records for known threats (identity -> (risk, events))."""
        now = self.clock()
        for identity, (risk, events) in known.items():
            with self._lock_for(identity):
                self.backend.set(ThreatRecord(identity, clamp(risk), list(events), now))

    def record_threat(self, identity: str, event: str, severity: float) -> ThreatRecord:
        """Append an event and add its severity. Repeated calls compound."""
        with self._lock_for(identity):
            record = self.backend.get(identity) or ThreatRecord(identity)
            record.threat_events.append(event)
            record.risk_score = clamp(record.risk_score + severity)
            record.last_seen_at = self.clock()
            self.backend.set(record)
        logger.debug("threat %s severity=%.2f risk=%.2f", event, severity, record.risk_score)
        return record

    def reduce_risk(self, identity: str, amount: float) -> Optional[ThreatRecord]:
        """Lower an existing record's risk. Never creates a record or logs an event."""
        # Records are never deleted, so an absent identity needs no lock.
        if self.backend.get(identity) is None:
            return None
        with self._lock_for(identity):
            record = self.backend.get(identity)
            if record is None:
                return None
            record.risk_score = clamp(record.risk_score - amount)
            self.backend.set(record)
        logger.debug("risk reduced by %.2f to %.2f", amount, record.risk_score)
        return record

    def lookup(self, identity: str) -> Optional[ThreatRecord]:
        """Snapshot of the record, or None. Takes no lock: backends return copies."""
        return self.backend.get(identity)

    def __len__(self) -> int:
        return len(self.backend)
