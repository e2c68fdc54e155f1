"""
botshield Challenge Engine

Small interactive puzzles (logic, pattern, riddle, math) used to confirm
human presence, plus answer verification. Puzzle content is plain data
and can be swapped by passing a different pool to ChallengeEngine.
"""

import copy
import random
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from botshield.models import Challenge

# Each instance: (payload, canonical solution)
PuzzlePool = Dict[str, List[Tuple[Dict[str, Any], str]]]


def _logic(question: str, options: List[str], answer: str):
    return {"question": question, "options": options}, answer.lower()


def _sequence(sequence: List[int], nxt: int, rule: str):
    payload = {
        "question": f"What comes next in this sequence: {', '.join(str(n) for n in sequence)}, ?",
        "sequence": sequence,
        "rule": rule,
    }
    return payload, str(nxt)


def _riddle(question: str, answer: str):
    return {"question": question}, answer.lower()


DEFAULT_POOL: PuzzlePool = {
    "logic": [
        _logic(
            "If all roses are flowers and some flowers fade quickly, "
            "can we conclude that some roses fade quickly?",
            ["Yes", "No", "Cannot be determined"],
            "Cannot be determined",
        ),
        _logic(
            "A bat and a ball cost $1.10 in total. The bat costs $1.00 more "
            "than the ball. How much does the ball cost?",
            ["$0.10", "$0.05", "$0.15"],
            "$0.05",
        ),
    ],
    "pattern": [
        _sequence([1, 1, 2, 3, 5, 8], 13, "Fibonacci"),
        _sequence([2, 6, 12, 20, 30], 42, "n(n+1)"),
        _sequence([1, 4, 9, 16, 25], 36, "Perfect squares"),
    ],
    "riddle": [
        _riddle(
            "I am not alive, but I grow; I don't have lungs, but I need air; "
            "I don't have a mouth, but water kills me. What am I?",
            "fire",
        ),
        _riddle("The more you take, the more you leave behind. What am I?", "footsteps"),
    ],
    "math": [
        ({"question": "What is 7 × 8?", "hint": "Think multiplication"}, str(7 * 8)),
    ],
}

FALLBACK_TYPE = "math"
CHALLENGE_TYPES = ("logic", "pattern", "math", "riddle")


def normalize_answer(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip().lower()


def verify(submitted_answer: Any, expected_solution: Any) -> bool:
    """Trimmed, case-insensitive exact match. Missing values never verify."""
    answer = normalize_answer(submitted_answer)
    solution = normalize_answer(expected_solution)
    if answer is None or solution is None:
        return False
    return answer == solution


class ChallengeEngine:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        pool: Optional[PuzzlePool] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.rng = rng or random.Random()
        self.pool = pool or DEFAULT_POOL
        self.clock = clock
        empty = [kind for kind, instances in self.pool.items() if not instances]
        if empty:
            raise ValueError(f"Challenge pool has no puzzles for: {', '.join(empty)}")
        # Built-in kinds keep their order; extra kinds from a custom pool follow.
        self.types = tuple(t for t in CHALLENGE_TYPES if t in self.pool) + tuple(
            t for t in self.pool if t not in CHALLENGE_TYPES
        )

    def generate(self, kind: Optional[str] = None) -> Challenge:
        """Build a challenge of the given kind, or of a uniformly random kind."""
        if kind is None:
            kind = self.rng.choice(self.types)
        if kind not in self.pool:
            kind = FALLBACK_TYPE if FALLBACK_TYPE in self.pool else self.types[0]
        payload, solution = self.rng.choice(self.pool[kind])
        return Challenge(
            challenge_id=str(uuid.uuid4()),
            type=kind,
            payload=copy.deepcopy(payload),
            expected_solution=solution,
            timestamp=int(self.clock() * 1000),
        )

    @staticmethod
    def verify(submitted_answer: Any, expected_solution: Any) -> bool:
        return verify(submitted_answer, expected_solution)


# =============================================================================
# Server-side storage (In-Memory - Use Redis in production)
# =============================================================================

class ChallengeStore:
    """Keeps issued solutions server-side so clients cannot supply their own."""

    def __init__(self, ttl: float = 300, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self.clock = clock
        self.challenges: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def put(self, challenge: Challenge) -> None:
        expires_at = self.clock() + self.ttl
        with self._lock:
            self.challenges[challenge.challenge_id] = (challenge.expected_solution, expires_at)
            if len(self.challenges) % 100 == 0:
                self._cleanup()

    def take(self, challenge_id: Optional[str]) -> Optional[str]:
        """Remove and return a live challenge's solution (one-time use)."""
        if not isinstance(challenge_id, str) or not challenge_id:
            return None
        with self._lock:
            entry = self.challenges.pop(challenge_id, None)
        if entry is None:
            return None
        solution, expires_at = entry
        if self.clock() > expires_at:
            return None
        return solution

    def _cleanup(self):
        now = self.clock()
        expired = [cid for cid, (_, exp) in self.challenges.items() if now > exp]
        for cid in expired:
            del self.challenges[cid]

    def __len__(self) -> int:
        return len(self.challenges)
