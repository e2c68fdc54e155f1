"""
botshield Server - FastAPI transport

Run: uvicorn botshield.server:app --host 0.0.0.0 --port 3000
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from botshield import __version__
from botshield.challenges import ChallengeStore
from botshield.config import Settings, configure_logging
from botshield.protection import BotProtection

logger = logging.getLogger(__name__)

MASK_TOKEN = "***"
DEFAULT_CLIENT_IP = "127.0.0.1"


# =============================================================================
# Models
# =============================================================================

class VerifyChallengeRequest(BaseModel):
    # Any JSON value is accepted; wrong shapes simply fail verification.
    challengeId: Optional[Any] = None
    answer: Optional[Any] = None
    solution: Optional[Any] = None


# =============================================================================
# Helpers
# =============================================================================

def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    if request.client and request.client.host:
        return request.client.host
    return DEFAULT_CLIENT_IP


def mask_identity(identity: str, prefix: int = 8) -> str:
    return identity[:prefix] + MASK_TOKEN


def build_protection(settings: Settings) -> BotProtection:
    store = ChallengeStore(ttl=settings.challenge_ttl) if settings.store_challenges else None
    if settings.seed_known_threats:
        return BotProtection.with_known_threats(challenge_store=store)
    return BotProtection(challenge_store=store)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# =============================================================================
# App
# =============================================================================

def create_app(settings: Optional[Settings] = None, protection: Optional[BotProtection] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    protection = protection or build_protection(settings)

    app = FastAPI(title="botshield", version=__version__)
    app.state.settings = settings
    app.state.protection = protection

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Forwarded-For"],
    )

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.api_route("/api/analyze-ai", methods=["GET", "POST"])
    async def analyze_ai(request: Request):
        ip = get_client_ip(request)
        masked = mask_identity(ip, settings.mask_prefix)
        user_agent = request.headers.get("User-Agent", "")
        analysis = protection.analyze_request(user_agent, request.headers, ip)
        if analysis.result.is_automated:
            logger.info(
                "Automated client %s confidence=%.2f types=%s",
                masked, analysis.result.confidence, ",".join(analysis.result.categories),
            )

        body = analysis.to_dict()
        body["ip"] = masked
        return body

    @app.get("/api/threat-intel")
    async def threat_intel(request: Request):
        return protection.get_threat_summary(get_client_ip(request)).to_dict()

    @app.get("/api/advanced-challenge")
    async def advanced_challenge(kind: Optional[str] = Query(None, alias="type")):
        challenge = protection.issue_challenge(kind)
        return challenge.to_dict(include_solution=protection.challenge_store is None)

    @app.post("/api/verify-challenge")
    async def verify_challenge(req: VerifyChallengeRequest, request: Request):
        ip = get_client_ip(request)
        outcome = protection.verify_challenge(req.challengeId, req.answer, req.solution, ip)
        if not outcome.verified:
            logger.warning("Failed challenge from %s", mask_identity(ip, settings.mask_prefix))
        return outcome.to_dict()

    @app.get("/")
    @app.get("/api")
    async def info():
        return {
            "service": "botshield - Enhanced Bot Protection API",
            "version": __version__,
            "endpoints": {
                "/api/analyze-ai": "Advanced AI detection analysis",
                "/api/threat-intel": "Threat intelligence lookup",
                "/api/advanced-challenge": "Generate advanced verification challenges",
                "/api/verify-challenge": "Verify challenge responses (POST)",
            },
            "features": {
                "aiDetection": "Advanced AI model signature detection",
                "threatIntel": "Real-time threat intelligence",
                "challenges": "Multi-type verification challenges",
                "behavioral": "Behavioral pattern analysis",
            },
            "protection": protection.describe(),
            "timestamp": _iso_now(),
        }

    return app


app = create_app()


def main():
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run("botshield.server:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
