from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import ExperienceLoadError, ExperienceValidationError
from .models.experience import Experience
from .validator import ValidationFailure, validate_experience

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any:
    if not path.exists():
        raise ExperienceLoadError(path=path, reason="File not found")
    try:
        with path.open("r", encoding="utf-8") as fp:
            return json.load(fp)
    except json.JSONDecodeError as exc:
        raise ExperienceLoadError(path=path, reason=f"Failed to parse JSON ({exc.msg})") from exc
    except UnicodeDecodeError as exc:
        raise ExperienceLoadError(path=path, reason="File is not valid UTF-8") from exc
    except RecursionError as exc:
        raise ExperienceLoadError(path=path, reason="Failed to parse JSON (nesting too deep)") from exc
    except OSError as exc:
        raise ExperienceLoadError(path=path, reason=f"Cannot read file ({exc.strerror or exc})") from exc


def read_json_mapping(path: Path) -> Mapping[str, Any]:
    """Read a results or comments file; both must be JSON objects."""
    data = read_json(path)
    if not isinstance(data, dict):
        raise ExperienceLoadError(path=path, reason="Expected a JSON object")
    return data


def load_experience(path: Path) -> Experience:
    logger.info(f"Loading experience from: {path}")
    validation = validate_experience(read_json(path))
    if isinstance(validation, ValidationFailure):
        raise ExperienceValidationError(issues=list(validation.errors), source=str(path))
    return validation.experience


__all__ = ["load_experience", "read_json", "read_json_mapping"]
