"""
botshield Signature Catalog

Known automation identifiers, suspicious headers and weighted
User-Agent behaviour patterns used by the classifier.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Tuple


# =============================================================================
# Categories
# =============================================================================

class PatternCategory(str, Enum):
    AUTOMATION = "automation"
    API_CLIENT = "api-client"
    RESEARCH = "research"
    SCRAPING = "scraping"
    MONITORING = "monitoring"


@dataclass(frozen=True)
class BehaviorPattern:
    pattern: re.Pattern
    weight: float
    category: PatternCategory


# =============================================================================
# Signatures
# =============================================================================

AI_IDENTIFIERS = (
    "gpt", "chatgpt", "openai", "claude", "anthropic", "bard", "gemini",
    "llama", "alpaca", "vicuna", "palm", "lamda", "bert", "transformer",
    "neural", "ai-agent", "assistant", "copilot", "codex",
)

SUSPICIOUS_HEADERS = (
    "x-openai", "x-anthropic", "x-ai", "x-bot", "x-automated",
    "x-scraper", "x-crawler", "x-agent", "x-research",
)

BEHAVIOR_PATTERNS = (
    BehaviorPattern(re.compile(r"python.*requests", re.I), 0.6, PatternCategory.AUTOMATION),
    BehaviorPattern(re.compile(r"selenium|puppeteer|playwright", re.I), 0.8, PatternCategory.AUTOMATION),
    BehaviorPattern(re.compile(r"api.*client", re.I), 0.5, PatternCategory.API_CLIENT),
    BehaviorPattern(re.compile(r"research|academic|paper", re.I), 0.4, PatternCategory.RESEARCH),
    BehaviorPattern(re.compile(r"data.*collection|scraping", re.I), 0.7, PatternCategory.SCRAPING),
    BehaviorPattern(re.compile(r"monitoring|testing|checking", re.I), 0.3, PatternCategory.MONITORING),
)

STANDARD_BROWSER_HEADERS = ("accept", "accept-language", "accept-encoding")

HTML_MEDIA_TYPE = "text/html"

# Score contributions
AI_IDENTIFIER_WEIGHT = 0.8
SUSPICIOUS_HEADER_WEIGHT = 0.7
MISSING_HEADER_WEIGHT = 0.2
NO_HTML_ACCEPT_WEIGHT = 0.4

# Ledger preload: identity -> (risk score, events)
KNOWN_THREATS: Dict[str, Tuple[float, Tuple[str, ...]]] = {
    "0.0.0.0": (1.0, ("known-bot-network",)),
}


@dataclass(frozen=True)
class SignatureCatalog:
    """Bundle of signatures and weights consumed by the Classifier."""
    ai_identifiers: Tuple[str, ...] = AI_IDENTIFIERS
    suspicious_headers: Tuple[str, ...] = SUSPICIOUS_HEADERS
    behavior_patterns: Tuple[BehaviorPattern, ...] = BEHAVIOR_PATTERNS
    standard_headers: Tuple[str, ...] = STANDARD_BROWSER_HEADERS
    html_media_type: str = HTML_MEDIA_TYPE
    identifier_weight: float = AI_IDENTIFIER_WEIGHT
    header_weight: float = SUSPICIOUS_HEADER_WEIGHT
    missing_header_weight: float = MISSING_HEADER_WEIGHT
    no_html_weight: float = NO_HTML_ACCEPT_WEIGHT

    def match_identifiers(self, user_agent: str) -> List[str]:
        """Identifiers found as case-insensitive substrings of the User-Agent."""
        ua = user_agent.lower()
        return [ident for ident in self.ai_identifiers if ident in ua]

    def match_patterns(self, user_agent: str) -> List[BehaviorPattern]:
        return [bp for bp in self.behavior_patterns if bp.pattern.search(user_agent)]

    def extend(self, identifiers=(), headers=(), patterns=()) -> "SignatureCatalog":
        """Return a copy with extra signatures appended."""
        return replace(
            self,
            ai_identifiers=self.ai_identifiers + tuple(i.lower() for i in identifiers),
            suspicious_headers=self.suspicious_headers + tuple(h.lower() for h in headers),
            behavior_patterns=self.behavior_patterns + tuple(patterns),
        )


DEFAULT_CATALOG = SignatureCatalog()
