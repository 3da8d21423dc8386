"""Exceptions raised by the file and transport adapters.

The validator itself never raises; these wrap its failures for callers that
want exception flow (CLI, service startup).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .validator import ValidationIssue


@dataclass(eq=False)
class ExperienceLoadError(Exception):
    """A document could not be read or decoded as JSON."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.path}"


@dataclass(eq=False)
class ExperienceValidationError(Exception):
    """An experience document parsed as JSON but failed validation."""

    issues: Sequence[ValidationIssue] = field(default_factory=list)
    source: str | None = None

    def __str__(self) -> str:
        header = f"Validation failed for {self.source}" if self.source else "Validation failed"
        lines = [header, *(f"  - {issue.describe()}" for issue in self.issues)]
        return "\n".join(lines)


__all__ = ["ExperienceLoadError", "ExperienceValidationError"]
