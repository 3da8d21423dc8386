from __future__ import annotations

from typing import Any, Literal, Mapping, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

Number = Union[StrictInt, StrictFloat]


class TemplateModel(BaseModel):
    """Base for author-written template data.

    Unknown keys are dropped so documents produced by newer authoring tools
    still validate.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class SectionBase(TemplateModel):
    id: StrictStr
    type: StrictStr
    title: StrictStr | None = None
    description: StrictStr | None = None


class LabeledOption(TemplateModel):
    id: StrictStr
    label: StrictStr


class InfoSection(SectionBase):
    type: Literal["info"]
    content: StrictStr


class ChoiceSection(SectionBase):
    type: Literal["choice"]
    multi_select: StrictBool | None = Field(default=None, alias="multiSelect")
    allow_custom: StrictBool | None = Field(default=None, alias="allowCustom")
    options: Sequence[LabeledOption]


class RankSection(SectionBase):
    type: Literal["rank"]
    items: Sequence[LabeledOption]


class TextReviewSection(SectionBase):
    type: Literal["text-review"]
    content: StrictStr | None = None


class DecisionSection(SectionBase):
    type: Literal["decision"]
    message: StrictStr | None = None


class KanbanItem(TemplateModel):
    id: StrictStr
    label: StrictStr
    column_id: StrictStr = Field(alias="columnId")


class KanbanSection(SectionBase):
    type: Literal["kanban"]
    columns: Sequence[LabeledOption]
    items: Sequence[KanbanItem]


class GalleryImage(TemplateModel):
    id: StrictStr
    src: StrictStr
    label: StrictStr | None = None


class ImageChoiceSection(SectionBase):
    type: Literal["image-choice"]
    images: Sequence[GalleryImage]


class HeaderTemplate(TemplateModel):
    key: StrictStr
    value: StrictStr


class ResponseCodeTemplate(TemplateModel):
    code: Number
    label: StrictStr
    body: StrictStr | None = None


class EndpointTemplate(TemplateModel):
    id: StrictStr
    method: StrictStr | None = None
    path: StrictStr | None = None
    description: StrictStr | None = None


class ApiBuilderSection(SectionBase):
    type: Literal["api-builder"]
    base_path: StrictStr | None = Field(default=None, alias="basePath")
    allowed_methods: Sequence[StrictStr] | None = Field(default=None, alias="allowedMethods")
    default_path: StrictStr | None = Field(default=None, alias="defaultPath")
    default_body: StrictStr | None = Field(default=None, alias="defaultBody")
    default_headers: Sequence[HeaderTemplate] | None = Field(default=None, alias="defaultHeaders")
    response_codes: Sequence[ResponseCodeTemplate] | None = Field(default=None, alias="responseCodes")
    initial_endpoints: Sequence[EndpointTemplate] | None = Field(default=None, alias="initialEndpoints")
    max_endpoints: Number | None = Field(default=None, alias="maxEndpoints")


class DataMapperSection(SectionBase):
    type: Literal["data-mapper"]
    sources: Sequence[LabeledOption]
    targets: Sequence[LabeledOption]


class LiveComponentSection(SectionBase):
    type: Literal["live-component"]
    default_code: StrictStr = Field(alias="defaultCode")


class NumericItem(TemplateModel):
    id: StrictStr
    label: StrictStr
    max: Number | None = None


class NumericInputsSection(SectionBase):
    type: Literal["numeric-inputs"]
    items: Sequence[NumericItem]


class CardDeckSection(SectionBase):
    type: Literal["card-deck"]
    template: Mapping[StrictStr, Any]
    initial_cards: Sequence[Mapping[StrictStr, Any]] | None = Field(default=None, alias="initialCards")


class CodeOption(TemplateModel):
    id: StrictStr
    label: StrictStr
    code: StrictStr


class CodeSelectorSection(SectionBase):
    type: Literal["code-selector"]
    language: StrictStr | None = None
    options: Sequence[CodeOption] = Field(min_length=2, max_length=5)


__all__ = [
    "ApiBuilderSection",
    "CardDeckSection",
    "ChoiceSection",
    "CodeOption",
    "CodeSelectorSection",
    "DataMapperSection",
    "DecisionSection",
    "EndpointTemplate",
    "GalleryImage",
    "HeaderTemplate",
    "ImageChoiceSection",
    "InfoSection",
    "KanbanItem",
    "KanbanSection",
    "LabeledOption",
    "LiveComponentSection",
    "Number",
    "NumericInputsSection",
    "NumericItem",
    "RankSection",
    "ResponseCodeTemplate",
    "SectionBase",
    "TemplateModel",
    "TextReviewSection",
]
