"""
botshield orchestration

BotProtection wires the Classifier, Threat Ledger and Challenge Engine
together behind the four operations the HTTP layer calls.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from botshield.challenges import ChallengeEngine, ChallengeStore
from botshield.classifier import Classifier
from botshield.ledger import ThreatLedger
from botshield.models import (
    Analysis,
    Challenge,
    HeaderValue,
    ThreatSummary,
    VerificationOutcome,
)
from botshield.signatures import KNOWN_THREATS

logger = logging.getLogger(__name__)

AI_DETECTED_EVENT = "ai-detected"
FAILED_CHALLENGE_EVENT = "failed-challenge"
FAILED_CHALLENGE_SEVERITY = 0.1
VERIFIED_RISK_REDUCTION = 0.2


class BotProtection:
    def __init__(
        self,
        ledger: Optional[ThreatLedger] = None,
        classifier: Optional[Classifier] = None,
        challenges: Optional[ChallengeEngine] = None,
        challenge_store: Optional[ChallengeStore] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.clock = clock
        self.ledger = ledger if ledger is not None else ThreatLedger(clock=clock)
        self.classifier = classifier or Classifier()
        self.challenges = challenges or ChallengeEngine(clock=clock)
        self.challenge_store = challenge_store

    @classmethod
    def with_known_threats(cls, **kwargs) -> "BotProtection":
        protection = cls(**kwargs)
        protection.ledger.preload(KNOWN_THREATS)
        return protection

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def analyze_request(
        self,
        user_agent: str,
        headers: Mapping[str, HeaderValue],
        identity: str,
    ) -> Analysis:
        """Classify a request; automated verdicts are recorded against the client."""
        result = self.classifier.classify(user_agent, headers)
        if result.is_automated:
            self.ledger.record_threat(identity, AI_DETECTED_EVENT, result.confidence)
        return Analysis(result, datetime.fromtimestamp(self.clock(), tz=timezone.utc))

    def get_threat_summary(self, identity: str) -> ThreatSummary:
        record = self.ledger.lookup(identity)
        if record is None:
            return ThreatSummary(has_data=False)
        return ThreatSummary(
            has_data=True,
            risk_score=record.risk_score,
            event_count=len(record.threat_events),
            last_seen=int(record.last_seen_at * 1000),
        )

    def issue_challenge(self, kind: Optional[str] = None) -> Challenge:
        challenge = self.challenges.generate(kind)
        if self.challenge_store is not None:
            self.challenge_store.put(challenge)
        logger.info("Issued %s challenge %s", challenge.type, challenge.challenge_id)
        return challenge

    def verify_challenge(
        self,
        challenge_id: Any,
        answer: Any,
        solution: Any,
        identity: str,
    ) -> VerificationOutcome:
        """
        Check an answer and adjust the client's risk.

        With a challenge store configured the stored solution is used and
        the client-supplied one is ignored.
        """
        if self.challenge_store is not None:
            solution = self.challenge_store.take(challenge_id)

        verified = self.challenges.verify(answer, solution)
        if verified:
            self.ledger.reduce_risk(identity, VERIFIED_RISK_REDUCTION)
            logger.info("Challenge %s verified", challenge_id)
        else:
            self.ledger.record_threat(identity, FAILED_CHALLENGE_EVENT, FAILED_CHALLENGE_SEVERITY)
            logger.info("Challenge %s failed", challenge_id)
        return VerificationOutcome(verified, challenge_id, self._now_ms())

    def describe(self) -> Dict[str, int]:
        return {
            "aiModels": len(self.classifier.catalog.ai_identifiers),
            "threatDatabase": len(self.ledger),
            "challengeTypes": len(self.challenges.types),
        }
