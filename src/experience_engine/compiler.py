from __future__ import annotations

import logging
from typing import Any, Mapping

from .formatters import (
    SECTION_FORMATTERS,
    UNCOMMENTED_SECTION_TYPES,
    Formatter,
    format_comment,
    format_unknown,
)
from .models.experience import Experience

logger = logging.getLogger(__name__)

Results = Mapping[str, Any]
Comments = Mapping[str, str]


class SummaryCompiler:
    """Turns an experience and its captured results into a Markdown report.

    Compilation is a pure function of its inputs: nothing is cached and the
    experience, results and comments are only read.
    """

    def __init__(
        self,
        *,
        formatters: Mapping[str, Formatter] = SECTION_FORMATTERS,
        uncommented_types: frozenset[str] = UNCOMMENTED_SECTION_TYPES,
    ) -> None:
        self._formatters = dict(formatters)
        self._uncommented_types = uncommented_types

    def compile(
        self,
        experience: Experience,
        results: Results,
        comments: Comments | None = None,
    ) -> str:
        lines = self._build_header(experience)
        comments = comments or {}
        for section in experience.sections:
            block = self._build_section(section, results.get(section.id), comments.get(section.id))
            if block.strip():
                lines.append(block)
        logger.debug(
            f"Compiled summary for {experience.id}",
            extra={"extra": {"experience_id": experience.id, "sections": len(experience.sections)}},
        )
        return "\n".join(lines)

    def _build_header(self, experience: Experience) -> list[str]:
        lines = [f"# {experience.title}", ""]
        if experience.author:
            lines.extend([f"*By {experience.author}*", ""])
        if experience.description:
            lines.extend([experience.description, ""])
        lines.extend(["---", ""])
        return lines

    def _build_section(self, section: Any, result: Any, comment: Any) -> str:
        formatter = self._formatters.get(section.type)
        if formatter is None:
            logger.warning(f"No formatter registered for section type {section.type!r} ({section.id})")
            body = format_unknown(section, result)
        else:
            body = formatter(section, result)
        if not body.strip() or section.type in self._uncommented_types:
            return body
        return body + format_comment(comment)


_default_compiler = SummaryCompiler()


def compile_summary(
    experience: Experience,
    results: Results,
    comments: Comments | None = None,
) -> str:
    """Compile a Markdown summary using the registered section formatters."""
    return _default_compiler.compile(experience, results, comments)


__all__ = ["Comments", "Results", "SummaryCompiler", "compile_summary"]
