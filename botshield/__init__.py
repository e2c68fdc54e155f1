"""
botshield - request classification, threat accumulation and human
verification challenges for HTTP services.
"""

__version__ = "2.0.0"

from botshield.challenges import ChallengeEngine, ChallengeStore, verify
from botshield.classifier import Classifier, classify
from botshield.ledger import InMemoryBackend, LedgerBackend, ThreatLedger
from botshield.models import (
    Analysis,
    Challenge,
    ClassificationResult,
    RequestDescriptor,
    ThreatRecord,
    ThreatSummary,
    VerificationOutcome,
)
from botshield.protection import BotProtection
from botshield.signatures import DEFAULT_CATALOG, SignatureCatalog

__all__ = [
    "Analysis",
    "BotProtection",
    "Challenge",
    "ChallengeEngine",
    "ChallengeStore",
    "ClassificationResult",
    "Classifier",
    "DEFAULT_CATALOG",
    "InMemoryBackend",
    "LedgerBackend",
    "RequestDescriptor",
    "SignatureCatalog",
    "ThreatLedger",
    "ThreatRecord",
    "ThreatSummary",
    "VerificationOutcome",
    "classify",
    "verify",
]
