"""Tests for the request classifier."""

import pytest

from botshield.classifier import Classifier, classify
from botshield.models import RequestDescriptor
from botshield.signatures import DEFAULT_CATALOG

from tests.conftest import BROWSER_HEADERS, BROWSER_UA


def test_python_requests_with_only_host_is_automated():
    result = classify("python-requests/2.28", {"host": "example.com"})

    assert result.confidence == 1.0
    assert result.is_automated
    assert "automation" in result.categories
    assert "Missing standard headers: accept, accept-language, accept-encoding" in result.reasons
    assert "Does not accept HTML content" in result.reasons


def test_empty_user_agent_with_browser_headers_is_human():
    result = classify("", BROWSER_HEADERS)

    assert result.confidence == 0.0
    assert not result.is_automated
    assert result.categories == []
    assert result.reasons == []


def test_real_browser_is_human():
    result = classify(BROWSER_UA, BROWSER_HEADERS)
    assert not result.is_automated
    assert result.confidence == 0.0


def test_empty_inputs_still_run_all_checks():
    result = classify("", {})

    # 3 missing headers (0.6) + no HTML accept (0.4)
    assert result.confidence == 1.0
    assert result.is_automated
    assert len(result.reasons) == 2


def test_ai_identifier_adds_category_and_reason():
    result = classify("Mozilla/5.0 (compatible; Claude-Web/1.0)", BROWSER_HEADERS)

    assert result.categories == ["claude"]
    assert result.reasons == ["Contains AI model identifier: claude"]
    assert result.confidence == pytest.approx(0.8)
    assert result.is_automated


def test_suspicious_header_adds_reason_only():
    headers = dict(BROWSER_HEADERS, **{"X-Bot": "yes"})
    result = classify(BROWSER_UA, headers)

    assert result.confidence == pytest.approx(0.7)
    assert result.categories == []
    assert result.reasons == ["Suspicious header detected: x-bot"]


def test_suspicious_header_with_empty_value_ignored():
    headers = dict(BROWSER_HEADERS, **{"x-agent": ""})
    assert classify(BROWSER_UA, headers).confidence == 0.0


def test_headers_are_case_insensitive():
    headers = {"Accept": "text/html", "ACCEPT-LANGUAGE": "en", "Accept-Encoding": "gzip"}
    assert classify(BROWSER_UA, headers).confidence == 0.0


def test_multi_valued_header_is_joined():
    headers = dict(BROWSER_HEADERS, accept=["application/json", "text/html"])
    assert classify(BROWSER_UA, headers).confidence == 0.0


def test_categories_are_deduplicated_in_first_seen_order():
    ua = "python-requests selenium api client"
    result = classify(ua, BROWSER_HEADERS)

    assert result.categories == ["automation", "api-client"]
    assert result.reasons.count("Matched automation pattern") == 2


@pytest.mark.parametrize(
    "ua,expected",
    [
        ("monitoring-bot/1.0", 0.3),
        ("academic research crawler", 0.4),
        ("my api client", 0.5),
        ("data collection agent", 0.7),
    ],
)
def test_pattern_weights(ua, expected):
    assert classify(ua, BROWSER_HEADERS).confidence == pytest.approx(expected)


def test_threshold_is_strictly_greater_than_half():
    # research (0.4) alone stays below, research + no-html crosses
    below = classify("research", BROWSER_HEADERS)
    assert not below.is_automated

    headers = dict(BROWSER_HEADERS, accept="application/json")
    above = classify("research", headers)
    assert above.confidence == pytest.approx(0.8)
    assert above.is_automated


@pytest.mark.parametrize(
    "ua,headers",
    [
        ("", {}),
        ("GPTBot claude anthropic openai selenium scraping", {"x-ai": "1", "x-bot": "1"}),
        (BROWSER_UA, BROWSER_HEADERS),
        ("curl/8.0", {"accept": "*/*"}),
    ],
)
def test_confidence_bounds_and_verdict_agree(ua, headers):
    result = classify(ua, headers)
    assert 0.0 <= result.confidence <= 1.0
    assert result.is_automated == (result.confidence > 0.5)


def test_classification_is_pure():
    ua = "GPTBot/1.0 python-requests"
    headers = {"x-openai": "1"}
    assert classify(ua, headers) == classify(ua, headers)


def test_classify_request_descriptor():
    request = RequestDescriptor("Playwright/1.40", {"Accept": "text/html"})
    result = Classifier().classify_request(request)
    assert "automation" in result.categories
    assert request.header("ACCEPT") == "text/html"


def test_custom_catalog():
    classifier = Classifier(DEFAULT_CATALOG.extend(identifiers=["perplexity"]))
    result = classifier.classify("PerplexityBot/1.0", BROWSER_HEADERS)
    assert result.categories == ["perplexity"]
    assert result.is_automated


def test_bytes_and_scalar_header_values():
    headers = {
        "accept": b"text/html",
        "accept-language": "en",
        "accept-encoding": ("gzip", b"br"),
        "x-bot": 1,
    }
    request = RequestDescriptor(BROWSER_UA, headers)

    assert request.header("accept") == "text/html"
    assert request.header("accept-encoding") == "gzip, br"
    assert request.header("x-bot") == "1"
    assert classify(BROWSER_UA, headers).reasons == ["Suspicious header detected: x-bot"]
