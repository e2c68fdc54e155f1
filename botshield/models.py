"""
botshield data model

Request descriptors, classification verdicts, ledger records and
challenges exchanged between the core and the transport layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

HeaderValue = Union[str, bytes, Iterable[str]]


def _header_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return value.decode("latin-1")
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(_header_text(v) for v in value)
    return str(value)


def normalize_headers(headers: Optional[Mapping[str, HeaderValue]]) -> Dict[str, str]:
    """Lower-case header names; multi-valued headers are joined with ', '."""
    result: Dict[str, str] = {}
    if not headers:
        return result
    for name, value in headers.items():
        if value is None:
            continue
        value = _header_text(value)
        key = name.lower()
        if key in result and result[key]:
            result[key] = f"{result[key]}, {value}"
        else:
            result[key] = value
    return result


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable, case-insensitive view of one inbound request."""
    user_agent: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "user_agent", self.user_agent or "")
        object.__setattr__(self, "headers", MappingProxyType(normalize_headers(self.headers)))

    def header(self, name: str) -> str:
        return self.headers.get(name.lower(), "")


@dataclass(frozen=True)
class ClassificationResult:
    is_automated: bool
    confidence: float
    categories: List[str]
    reasons: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isAI": self.is_automated,
            "confidence": self.confidence,
            "aiType": list(self.categories),
            "reasoning": list(self.reasons),
        }


@dataclass
class ThreatRecord:
    identity: str
    risk_score: float = 0.0
    threat_events: List[str] = field(default_factory=list)
    last_seen_at: float = 0.0  # epoch seconds

    def copy(self) -> "ThreatRecord":
        return ThreatRecord(self.identity, self.risk_score, list(self.threat_events), self.last_seen_at)


@dataclass(frozen=True)
class ThreatSummary:
    has_data: bool
    risk_score: float = 0.0
    event_count: int = 0
    last_seen: Optional[int] = None  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasThreatData": self.has_data,
            "riskScore": self.risk_score,
            "threatCount": self.event_count,
            "lastSeen": self.last_seen,
        }


@dataclass(frozen=True)
class Challenge:
    challenge_id: str
    type: str
    payload: Dict[str, Any]
    expected_solution: str
    timestamp: int = 0  # epoch milliseconds

    def to_dict(self, include_solution: bool = True) -> Dict[str, Any]:
        data = {
            "challengeId": self.challenge_id,
            "type": self.type,
            "challenge": self.payload,
            "timestamp": self.timestamp,
        }
        if include_solution:
            data["solution"] = self.expected_solution
        return data


@dataclass(frozen=True)
class VerificationOutcome:
    verified: bool
    challenge_id: Any  # echoed as submitted
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verified": self.verified,
            "challengeId": self.challenge_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Analysis:
    result: ClassificationResult
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["timestamp"] = self.timestamp.isoformat().replace("+00:00", "Z")
        return data
