"""
Purification API Routes
Legal Purifier

Caller interface of the purification pipeline over HTTP.
"""

import logging
from typing import Optional, Dict

from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import settings
from core.language import Language
from core.purification.auditor import OutputAuditor
from core.purification.errors import InvalidRequest
from core.purification.models import ContentType
from core.purification.pipeline import PurificationPipeline
from core.purification.script_classifier import classify

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

# =========================================
# Pydantic Models
# =========================================

class PurifyRequest(BaseModel):
    """Text to purify"""
    text: str = Field("", description="Raw candidate text")
    target_language: Optional[str] = Field(None, description="Target language code: ar, fr")
    source_language: Optional[str] = Field(None, description="Source language code; detected when omitted")
    content_type: Optional[str] = Field(None, description="chat_message, legal_document or ui_label")
    priority: Optional[str] = Field(None, description="interactive or batch")


class PurifyResponse(BaseModel):
    text: str
    purity_score: float
    path: str


class AuditRequest(BaseModel):
    """Already-emitted fragments to re-validate"""
    fragments: Dict[str, str] = Field(default_factory=dict)
    target_language: Optional[str] = None
    content_type: Optional[str] = None


class AuditResponse(BaseModel):
    changed: int
    scanned: int
    fragments: Dict[str, str]


class ClassifyRequest(BaseModel):
    text: str = ""
    target_language: Optional[str] = None


class ClassifyResponse(BaseModel):
    """Script profile of a text against a target language"""
    purity: float
    dominant_script: Optional[str]
    script_counts: Dict[str, int]
    neutral_count: int
    accepted: Dict[str, bool]


# =========================================
# Global Pipeline
# =========================================

_pipeline: Optional[PurificationPipeline] = None


def get_pipeline() -> PurificationPipeline:
    """Get or create the global pipeline"""
    global _pipeline
    if _pipeline is None:
        _pipeline = PurificationPipeline.from_settings(settings)
    return _pipeline


def reset_pipeline():
    """Reset the global pipeline (useful for testing)"""
    global _pipeline
    _pipeline = None


def _target_or_400(code: Optional[str]) -> Language:
    language = Language.parse(code)
    if language is None:
        detail = "target_language is required" if not code else f"Unsupported target_language: {code!r}"
        raise HTTPException(status_code=400, detail=detail)
    return language


# =========================================
# Router
# =========================================

router = APIRouter(prefix="/api/v1", tags=["Purification"])


@router.post("/purify", response_model=PurifyResponse)
@limiter.limit(settings.rate_limit)
async def purify(
    request: Request,
    body: PurifyRequest,
    pipeline: PurificationPipeline = Depends(get_pipeline),
):
    """
    Purify one text unit.

    Always returns a result for a well-formed request; the `path` field tells
    which stage produced it (pass_through, provider_accepted, sanitized,
    fallback).
    """
    try:
        result = await pipeline.purify(
            body.text,
            body.target_language,
            source_language=body.source_language,
            content_type=body.content_type,
            priority=body.priority,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PurifyResponse(**result.to_dict())


@router.post("/audit", response_model=AuditResponse)
def audit(
    body: AuditRequest,
    pipeline: PurificationPipeline = Depends(get_pipeline),
):
    """Re-validate fragments; the request body is the text store"""
    target = _target_or_400(body.target_language)
    content_type = body.content_type or settings.audit_content_type
    try:
        content_type = ContentType(content_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown content_type: {content_type!r}")

    store = dict(body.fragments)
    auditor = OutputAuditor.from_pipeline(pipeline, default_content_type=content_type)
    report = auditor.audit_and_fix(store, target)
    return AuditResponse(changed=report.changed, scanned=report.scanned, fragments=store)


@router.post("/classify", response_model=ClassifyResponse)
async def classify_text(
    body: ClassifyRequest,
    pipeline: PurificationPipeline = Depends(get_pipeline),
):
    """Script profile and purity of a text (diagnostics)"""
    target = _target_or_400(body.target_language)
    profile = classify(body.text)
    return ClassifyResponse(
        purity=profile.purity(target),
        dominant_script=profile.dominant_script.value if profile.dominant_script else None,
        script_counts={family.value: count for family, count in profile.script_counts.items()},
        neutral_count=profile.neutral_count,
        accepted={
            content_type.value: pipeline.gate.accept(body.text, target, content_type)
            for content_type in ContentType
        },
    )


@router.get("/health")
async def health(pipeline: PurificationPipeline = Depends(get_pipeline)):
    """Provider order, rule-set version and counters"""
    return {
        "status": "ok",
        "providers": pipeline.orchestrator.provider_names,
        "ruleset_version": pipeline.sanitizer.version,
        "thresholds": {k.value: v for k, v in pipeline.gate.thresholds.items()},
        "stats": pipeline.stats(),
    }
