"""
botshield Classifier

Additive, evidence-accumulating scoring of request metadata. Pure: the
same User-Agent and headers always yield the same result.
"""

from typing import List, Mapping, Optional

from botshield.models import ClassificationResult, HeaderValue, RequestDescriptor
from botshield.signatures import DEFAULT_CATALOG, SignatureCatalog

AUTOMATION_THRESHOLD = 0.5


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class Classifier:
    def __init__(self, catalog: SignatureCatalog = DEFAULT_CATALOG):
        self.catalog = catalog

    def classify(self, user_agent: str, headers: Optional[Mapping[str, HeaderValue]] = None) -> ClassificationResult:
        return self.classify_request(RequestDescriptor(user_agent or "", headers or {}))

    def classify_request(self, request: RequestDescriptor) -> ClassificationResult:
        catalog = self.catalog
        ua = request.user_agent
        confidence = 0.0
        categories: List[str] = []
        reasons: List[str] = []

        # AI model identifiers in User-Agent
        for ident in catalog.match_identifiers(ua):
            confidence += catalog.identifier_weight
            categories.append(ident)
            reasons.append(f"Contains AI model identifier: {ident}")

        # Suspicious headers
        for name in catalog.suspicious_headers:
            if request.header(name):
                confidence += catalog.header_weight
                reasons.append(f"Suspicious header detected: {name}")

        # Behaviour patterns
        for bp in catalog.match_patterns(ua):
            confidence += bp.weight
            categories.append(bp.category.value)
            reasons.append(f"Matched {bp.category.value} pattern")

        # Missing standard browser headers
        missing = [h for h in catalog.standard_headers if not request.header(h)]
        if missing:
            confidence += len(missing) * catalog.missing_header_weight
            reasons.append(f"Missing standard headers: {', '.join(missing)}")

        # Content negotiation
        if catalog.html_media_type not in request.header("accept"):
            confidence += catalog.no_html_weight
            reasons.append("Does not accept HTML content")

        reported = min(max(confidence, 0.0), 1.0)
        return ClassificationResult(
            is_automated=reported > AUTOMATION_THRESHOLD,
            confidence=reported,
            categories=_dedupe(categories),
            reasons=reasons,
        )


_default_classifier = Classifier()


def classify(user_agent: str, headers: Optional[Mapping[str, HeaderValue]] = None) -> ClassificationResult:
    """Classify with the default signature catalog."""
    return _default_classifier.classify(user_agent, headers)
