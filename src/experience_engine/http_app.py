from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .compiler import compile_summary
from .logging_config import set_trace_id
from .models.experience import Experience
from .validator import ValidationFailure, ValidationIssue, validate_experience

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Cloud-Trace-Context"


class ValidateResponse(BaseModel):
    valid: bool
    experience: dict[str, Any] | None = None
    errors: list[ValidationIssue] = Field(default_factory=list)


class CompileRequest(BaseModel):
    experience: Any
    results: dict[str, Any] = Field(default_factory=dict)
    comments: dict[str, str] | None = None


class SummaryResponse(BaseModel):
    markdown: str


def _dump(experience: Experience) -> dict[str, Any]:
    return experience.model_dump(mode="json", by_alias=True, exclude_none=True)


def _issues_detail(issues: list[ValidationIssue]) -> list[dict[str, Any]]:
    return [issue.model_dump(mode="json") for issue in issues]


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, RecursionError) as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON") from exc


def extract_submission(body: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any] | None]:
    """Split a submission into results and comments.

    Results come from ``answers`` when it is an object, else ``result``,
    else the body itself.
    """
    if isinstance(body.get("answers"), dict):
        results = body["answers"]
    elif isinstance(body.get("result"), dict):
        results = body["result"]
    else:
        results = body
    comments = body.get("comments") if isinstance(body.get("comments"), dict) else None
    return results, comments


def create_app(*, experience: Experience | None = None) -> FastAPI:
    """Build the HTTP surface over the validator and compiler.

    ``experience`` is the document served at ``/v1/experience`` and compiled by
    ``/v1/submit``; without it those routes answer 404.
    """
    app = FastAPI(title="Experience Engine API", version="0.1.0")

    @app.middleware("http")
    async def trace_context(request: Request, call_next):
        header = request.headers.get(TRACE_HEADER)
        set_trace_id(header.split("/")[0] if header else uuid.uuid4().hex)
        try:
            return await call_next(request)
        finally:
            set_trace_id(None)

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.post("/v1/experiences:validate", response_model=ValidateResponse)
    async def validate(request: Request) -> ValidateResponse:
        validation = validate_experience(await _json_body(request))
        if isinstance(validation, ValidationFailure):
            return ValidateResponse(valid=False, errors=list(validation.errors))
        return ValidateResponse(valid=True, experience=_dump(validation.experience))

    @app.post("/v1/summaries:compile", response_model=SummaryResponse)
    async def compile_report(request: CompileRequest) -> SummaryResponse:
        validation = validate_experience(request.experience)
        if isinstance(validation, ValidationFailure):
            raise HTTPException(status_code=422, detail=_issues_detail(list(validation.errors)))
        markdown = compile_summary(validation.experience, request.results, request.comments)
        return SummaryResponse(markdown=markdown)

    @app.get("/v1/experience")
    async def get_experience() -> JSONResponse:
        if experience is None:
            raise HTTPException(status_code=404, detail="No experience loaded")
        return JSONResponse(_dump(experience))

    @app.post("/v1/submit", response_model=SummaryResponse)
    async def submit(request: Request) -> SummaryResponse:
        if experience is None:
            raise HTTPException(status_code=404, detail="No experience loaded")
        body = await _json_body(request)
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Submission must be a JSON object")
        results, comments = extract_submission(body)
        markdown = compile_summary(experience, results, comments)
        logger.info(
            f"Compiled submission for {experience.id}",
            extra={"extra": {"experience_id": experience.id, "markdown": markdown}},
        )
        return SummaryResponse(markdown=markdown)

    return app


__all__ = ["CompileRequest", "SummaryResponse", "ValidateResponse", "create_app", "extract_submission"]
