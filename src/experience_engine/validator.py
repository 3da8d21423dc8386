from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic import BaseModel, ValidationError

from .models.experience import Experience

logger = logging.getLogger(__name__)

DECISION_COUNT_MESSAGE = "Experience must contain exactly one DecisionSection"


class ValidationIssue(BaseModel):
    path: tuple[str, ...]
    message: str

    def describe(self) -> str:
        return f"[{'.'.join(self.path)}]: {self.message}"


@dataclass(frozen=True)
class ValidationSuccess:
    experience: Experience
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ValidationFailure:
    errors: Sequence[ValidationIssue]
    success: bool = field(default=False, init=False)


ValidationResult = ValidationSuccess | ValidationFailure


def validate_experience(raw: Any) -> ValidationResult:
    """Parse an arbitrary value into an Experience.

    Structural problems are reported as a list of issues; once the document
    parses, the single-decision rule is enforced on the ``sections`` path.
    Nothing is raised for bad input.
    """
    try:
        experience = Experience.model_validate(raw)
    except ValidationError as exc:
        issues = [_issue_from_error(error) for error in exc.errors()]
        logger.info(
            "Experience failed structural validation",
            extra={"extra": {"error_count": len(issues)}},
        )
        return ValidationFailure(errors=issues)

    decisions = experience.decision_count
    if decisions != 1:
        logger.info(
            f"Experience {experience.id} rejected: {decisions} decision sections",
        )
        return ValidationFailure(
            errors=[
                ValidationIssue(
                    path=("sections",),
                    message=f"{DECISION_COUNT_MESSAGE} (found {decisions})",
                )
            ]
        )

    logger.debug(f"Validated experience {experience.id} with {len(experience.sections)} sections")
    return ValidationSuccess(experience=experience)


def _issue_from_error(error: Any) -> ValidationIssue:
    return ValidationIssue(
        path=tuple(str(part) for part in error.get("loc", ())),
        message=error.get("msg", "Invalid value"),
    )


__all__ = [
    "DECISION_COUNT_MESSAGE",
    "ValidationFailure",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSuccess",
    "validate_experience",
]
