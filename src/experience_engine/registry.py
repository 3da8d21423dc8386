from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .models.section import (
    ApiBuilderSection,
    CardDeckSection,
    ChoiceSection,
    CodeSelectorSection,
    DataMapperSection,
    DecisionSection,
    ImageChoiceSection,
    InfoSection,
    KanbanSection,
    LiveComponentSection,
    NumericInputsSection,
    RankSection,
    SectionBase,
    TextReviewSection,
)


@dataclass(frozen=True)
class SectionDefinition:
    type: str
    label: str
    model: type[SectionBase]


def _define(section_type: str, label: str, model: type[SectionBase]) -> tuple[str, SectionDefinition]:
    return section_type, SectionDefinition(type=section_type, label=label, model=model)


# Registry order is also the member order of the Experience section union.
SECTION_REGISTRY: Mapping[str, SectionDefinition] = dict(
    [
        _define("info", "Info", InfoSection),
        _define("choice", "Choice", ChoiceSection),
        _define("rank", "Rank", RankSection),
        _define("text-review", "Text Review", TextReviewSection),
        _define("decision", "Decision", DecisionSection),
        _define("kanban", "Kanban", KanbanSection),
        _define("image-choice", "Image Choice", ImageChoiceSection),
        _define("api-builder", "API Builder", ApiBuilderSection),
        _define("data-mapper", "Data Mapper", DataMapperSection),
        _define("live-component", "Live Component", LiveComponentSection),
        _define("numeric-inputs", "Numeric Inputs", NumericInputsSection),
        _define("card-deck", "Card Deck", CardDeckSection),
        _define("code-selector", "Code Selector", CodeSelectorSection),
    ]
)

VALID_SECTION_TYPES: tuple[str, ...] = tuple(SECTION_REGISTRY)


def lookup(section_type: str) -> SectionDefinition | None:
    """Return the registered definition for a section type tag, if any."""
    return SECTION_REGISTRY.get(section_type)


def is_valid_section_type(section_type: str) -> bool:
    return section_type in SECTION_REGISTRY


__all__ = [
    "SECTION_REGISTRY",
    "SectionDefinition",
    "VALID_SECTION_TYPES",
    "is_valid_section_type",
    "lookup",
]
