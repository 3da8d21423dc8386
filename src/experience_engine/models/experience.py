from __future__ import annotations

from typing import Annotated, Sequence, Union

from pydantic import ConfigDict, Field, StrictStr

from ..registry import SECTION_REGISTRY
from .section import TemplateModel

Section = Annotated[
    Union[tuple(definition.model for definition in SECTION_REGISTRY.values())],
    Field(discriminator="type"),
]


class Experience(TemplateModel):
    id: StrictStr
    title: StrictStr
    description: StrictStr | None = None
    author: StrictStr
    sections: Sequence[Section]

    @property
    def decision_count(self) -> int:
        return sum(1 for section in self.sections if section.type == "decision")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "exp-001",
                "title": "Pick a stack",
                "author": "Platform Team",
                "sections": [
                    {
                        "id": "framework",
                        "type": "choice",
                        "title": "Frontend framework",
                        "options": [
                            {"id": "react", "label": "React"},
                            {"id": "vue", "label": "Vue"},
                        ],
                    },
                    {"id": "final", "type": "decision", "message": "Ship it?"},
                ],
            }
        }
    )


__all__ = ["Experience", "Section"]
