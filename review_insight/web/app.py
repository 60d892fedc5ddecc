"""
FastAPI Web Application - Review Insight API
============================================

JSON endpoints for running and reading review analyses:

    POST /api/analyze            {place_id, user_id}
    GET  /api/analyze            ?store_id=
    POST /api/emotion-analysis   {place_id, store_name?, store_id?}
    GET  /api/emotion-analysis   ?store_id=
"""

import logging
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..application import AnalysisService
from ..domain.errors import (
    MalformedResponseError,
    NotFoundError,
    ReviewInsightError,
    UpstreamError,
    ValidationError,
)
from ..infrastructure.config import get_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ── Globals ────────────────────────────────────────────────────────
service: Optional[AnalysisService] = None

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    UpstreamError: 502,
    MalformedResponseError: 502,
}


# ── Lifespan ───────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    global service
    for issue in get_settings().validate():
        logger.warning(issue)
    service = AnalysisService.from_settings()
    logger.info("Analysis service ready")
    yield


app = FastAPI(title="Review Insight", description="AI review scoring for places", lifespan=lifespan)


def get_service() -> AnalysisService:
    if service is None:
        raise RuntimeError("Analysis service is not initialized")
    return service


# ── Request models ─────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    place_id: Optional[str] = None
    user_id: Optional[str] = None


class EmotionAnalysisRequest(BaseModel):
    place_id: Optional[str] = None
    store_name: Optional[str] = None
    store_id: Optional[int] = None


# ── Error mapping ──────────────────────────────────────────────────

@app.exception_handler(ReviewInsightError)
async def handle_review_insight_error(request: Request, exc: ReviewInsightError):
    status_code = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 500
    )

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
        error = "Analysis failed" if request.method == "POST" else "Failed to get analysis"
    else:
        logger.info(f"{request.method} {request.url.path}: {exc}")
        error = str(exc)

    return JSONResponse(status_code=status_code, content={"error": error, "details": str(exc)})


# ── API Endpoints ──────────────────────────────────────────────────

@app.post("/api/analyze")
def analyze(body: AnalyzeRequest, svc: AnalysisService = Depends(get_service)):
    return svc.analyze_store(body.place_id, body.user_id)


@app.get("/api/analyze")
def get_analysis(store_id: Optional[str] = None, svc: AnalysisService = Depends(get_service)):
    return svc.latest_analysis(store_id)


@app.post("/api/emotion-analysis")
def emotion_analysis(body: EmotionAnalysisRequest, svc: AnalysisService = Depends(get_service)):
    return svc.analyze_emotions(body.place_id, body.store_name, body.store_id)


@app.get("/api/emotion-analysis")
def get_emotion_analysis(store_id: Optional[str] = None, svc: AnalysisService = Depends(get_service)):
    return svc.latest_emotions(store_id)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
