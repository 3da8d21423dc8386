"""Result normalization.

Results arrive as untyped JSON and, depending on which client produced them,
in more than one encoding per section type. Each function here detects the
encoding and returns a canonical form; precedence is fixed so the same input
always normalizes the same way.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from .models.section import (
    ChoiceSection,
    CodeSelectorSection,
    DataMapperSection,
    ImageChoiceSection,
    KanbanSection,
    LabeledOption,
    NumericInputsSection,
    RankSection,
)

logger = logging.getLogger(__name__)

SIDECAR_ITEMS_KEY = "__items__"
APPROVED_VALUES = ("approved", "yes")


@dataclass(frozen=True)
class OptionRef:
    id: str
    label: str


@dataclass(frozen=True)
class ImagePick:
    id: str
    label: str | None = None


@dataclass(frozen=True)
class NumericEntry:
    id: str
    label: str
    value: int | float = 0
    max: int | float | None = None


@dataclass(frozen=True)
class KanbanCard:
    content: str
    description: str | None = None


@dataclass(frozen=True)
class Endpoint:
    method: str = "GET"
    path: str = "/"
    description: str | None = None
    path_params: Sequence[tuple[str, str]] = field(default_factory=tuple)
    query_params: Sequence[tuple[str, str]] = field(default_factory=tuple)
    headers: Sequence[tuple[str, str]] = field(default_factory=tuple)
    body: str | None = None
    response_code: Any = None
    response_body: str | None = None
    # Any non-empty responseBody asks for a response line, even when it is blank text.
    response_declared: bool = False

    @property
    def has_response(self) -> bool:
        return bool(self.response_code) or self.response_declared or self.response_body is not None


@dataclass(frozen=True)
class ApiBuilderResult:
    endpoints: Sequence[Endpoint]
    legacy: bool


@dataclass(frozen=True)
class CodeSelection:
    selected_id: str
    label: str
    code: str
    original: str

    @property
    def modified(self) -> bool:
        return self.code != self.original


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_blank(value: Any) -> bool:
    """True for the values a JSON client treats as "no answer"."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if is_number(value):
        return value == 0 or math.isnan(value)
    return False


def display_text(value: Any) -> str:
    """Render a JSON scalar the way the authoring UI displays it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _is_tagged_entry(value: Any) -> bool:
    return isinstance(value, dict) and "id" in value


def _entry_label(entry: Mapping[str, Any]) -> str:
    label = entry.get("label")
    return display_text(label if label is not None else entry.get("id"))


def _resolve(options: Iterable[LabeledOption], raw_id: Any) -> OptionRef:
    for option in options:
        if option.id == raw_id:
            return OptionRef(id=option.id, label=option.label)
    text = display_text(raw_id)
    return OptionRef(id=text, label=text)


def normalize_choice(section: ChoiceSection, result: Any) -> list[OptionRef]:
    """Selected options, in result order.

    A non-empty list whose first element is an object with ``id`` is the
    tagged encoding (``{id, label, selected}``) and only selected entries are
    kept. Any other non-empty list is a list of selected ids, and a non-empty
    string is a single selected id. Ids missing from the template keep the id
    as their label, which covers user-added options.
    """
    if isinstance(result, list) and result:
        if _is_tagged_entry(result[0]):
            return [
                OptionRef(id=display_text(entry["id"]), label=_entry_label(entry))
                for entry in result
                if _is_tagged_entry(entry) and entry.get("selected")
            ]
        return [_resolve(section.options, selected_id) for selected_id in result]
    if isinstance(result, str) and result:
        return [_resolve(section.options, result)]
    return []


def normalize_rank(section: RankSection, result: Any) -> list[OptionRef]:
    """Ranked items, first to last.

    Tagged entries (``{id, label}``) are used as given; plain ids are
    resolved against the template items.
    """
    if not isinstance(result, list) or not result:
        return []
    if _is_tagged_entry(result[0]):
        return [
            OptionRef(id=display_text(entry["id"]), label=_entry_label(entry))
            for entry in result
            if _is_tagged_entry(entry)
        ]
    return [_resolve(section.items, item_id) for item_id in result]


def _number_or_zero(value: Any) -> int | float:
    return value if is_number(value) else 0


def normalize_numeric_inputs(section: NumericInputsSection, result: Any) -> list[NumericEntry] | None:
    """Numeric entries with their current values.

    ``None`` means no value has been captured yet. A plain list is the current
    encoding; an empty list means the user removed every item and yields an
    empty list. A mapping is the sidecar encoding: items come from
    ``__items__`` (or the template) and values are looked up by item id.
    """
    if is_blank(result):
        return None

    if isinstance(result, list):
        if not result or not _is_tagged_entry(result[0]):
            return []
        return [
            NumericEntry(
                id=display_text(entry["id"]),
                label=_entry_label(entry),
                value=_number_or_zero(entry.get("value")),
                max=entry.get("max") if is_number(entry.get("max")) else None,
            )
            for entry in result
            if _is_tagged_entry(entry)
        ]

    if isinstance(result, dict):
        sidecar = result.get(SIDECAR_ITEMS_KEY)
        if isinstance(sidecar, list):
            items = [
                (display_text(item["id"]), _entry_label(item), item.get("max"))
                for item in sidecar
                if _is_tagged_entry(item)
            ]
        else:
            items = [(item.id, item.label, item.max) for item in section.items]
        return [
            NumericEntry(
                id=item_id,
                label=label,
                value=_number_or_zero(result.get(item_id)),
                max=maximum if is_number(maximum) else None,
            )
            for item_id, label, maximum in items
        ]

    return []


def merge_kanban_items(section: KanbanSection, result: Any) -> dict[str, KanbanCard]:
    """Template items overlaid with user-created or edited sidecar items.

    Sidecar entries win on id collisions.
    """
    cards = {item.id: KanbanCard(content=item.label) for item in section.items}
    sidecar = result.get(SIDECAR_ITEMS_KEY) if isinstance(result, dict) else None
    if isinstance(sidecar, list):
        for item in sidecar:
            if not _is_tagged_entry(item):
                continue
            content = item.get("content") or item.get("label") or item["id"]
            description = item.get("description")
            cards[display_text(item["id"])] = KanbanCard(
                content=display_text(content),
                description=description if isinstance(description, str) else None,
            )
    return cards


def kanban_column_ids(result: Any, column_id: str) -> list[Any]:
    if not isinstance(result, dict):
        return []
    ids = result.get(column_id)
    return list(ids) if isinstance(ids, list) else []


def _pairs(entries: Any) -> tuple[tuple[str, str], ...]:
    if not isinstance(entries, list):
        return ()
    pairs = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        key = entry.get("key")
        if not isinstance(key, str) or not key.strip():
            continue
        value = entry.get("value")
        pairs.append((key, "" if value is None else display_text(value)))
    return tuple(pairs)


def _non_blank_text(value: Any) -> str | None:
    return value if isinstance(value, str) and value.strip() else None


def _endpoint(raw: Mapping[str, Any]) -> Endpoint:
    path_params = raw.get("pathParams")
    description = raw.get("description")
    return Endpoint(
        method=display_text(raw.get("method") or "GET"),
        path=display_text(raw.get("path") or "/"),
        description=description if isinstance(description, str) and description else None,
        path_params=tuple(
            (display_text(key), display_text(value)) for key, value in path_params.items()
        )
        if isinstance(path_params, dict)
        else (),
        query_params=_pairs(raw.get("queryParams")),
        headers=_pairs(raw.get("headers")),
        body=_non_blank_text(raw.get("body")),
        response_code=raw.get("responseCode") or None,
        response_body=_non_blank_text(raw.get("responseBody")),
        response_declared=not is_blank(raw.get("responseBody")),
    )


def normalize_api_builder(result: Any) -> ApiBuilderResult | None:
    """Endpoints defined by the user.

    An object carrying an ``endpoints`` list is the multi-endpoint encoding;
    any other object is a single legacy endpoint. Non-objects define nothing.
    """
    if not isinstance(result, dict):
        return None
    endpoints = result.get("endpoints")
    if isinstance(endpoints, list):
        return ApiBuilderResult(
            endpoints=[_endpoint(raw) for raw in endpoints if isinstance(raw, dict)],
            legacy=False,
        )
    return ApiBuilderResult(endpoints=[_endpoint(result)], legacy=True)


def pretty_json(text: str) -> str:
    """Pretty-print embedded JSON, or hand back the text unchanged."""
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except (ValueError, RecursionError):
        logger.debug("Embedded body is not printable JSON; emitting verbatim")
        return text


def response_status_marker(code: Any) -> str:
    try:
        status = float(code)
    except (TypeError, ValueError):
        return ""
    if 200 <= status < 300:
        return " ✓"
    if status >= 400:
        return " ⚠️"
    return ""


def is_approved(result: Any) -> bool:
    return result is True or (isinstance(result, str) and result in APPROVED_VALUES)


def resolve_image(section: ImageChoiceSection, result: Any) -> ImagePick | None:
    """The picked gallery image. Ids missing from the gallery carry no label."""
    if is_blank(result):
        return None
    for image in section.images:
        if image.id == result:
            return ImagePick(id=image.id, label=image.label or image.id)
    return ImagePick(id=display_text(result))


def _lookup_label(labels: Mapping[str, str], raw_id: Any) -> str:
    if isinstance(raw_id, str) and raw_id in labels:
        return labels[raw_id]
    return display_text(raw_id)


def resolve_connections(section: DataMapperSection, result: Any) -> list[tuple[str, str]]:
    if not isinstance(result, list):
        return []
    sources = {source.id: source.label for source in section.sources}
    targets = {target.id: target.label for target in section.targets}
    rows = []
    for connection in result:
        if not isinstance(connection, dict):
            continue
        source_id = connection.get("sourceId")
        target_id = connection.get("targetId")
        rows.append((_lookup_label(sources, source_id), _lookup_label(targets, target_id)))
    return rows


def resolve_code_selection(section: CodeSelectorSection, result: Any) -> CodeSelection | None:
    if not isinstance(result, dict):
        return None
    selected_id = result.get("selectedId")
    if is_blank(selected_id):
        return None
    selected_id = display_text(selected_id)
    option = next((opt for opt in section.options if opt.id == selected_id), None)
    original = option.code if option else ""
    edits = result.get("code")
    edited = edits.get(selected_id) if isinstance(edits, dict) else None
    return CodeSelection(
        selected_id=selected_id,
        label=option.label if option else selected_id,
        code=edited if isinstance(edited, str) and edited else original,
        original=original,
    )


__all__ = [
    "APPROVED_VALUES",
    "ApiBuilderResult",
    "CodeSelection",
    "Endpoint",
    "ImagePick",
    "KanbanCard",
    "NumericEntry",
    "OptionRef",
    "SIDECAR_ITEMS_KEY",
    "display_text",
    "is_approved",
    "is_blank",
    "is_number",
    "kanban_column_ids",
    "merge_kanban_items",
    "normalize_api_builder",
    "normalize_choice",
    "normalize_numeric_inputs",
    "normalize_rank",
    "pretty_json",
    "resolve_code_selection",
    "resolve_connections",
    "resolve_image",
]
