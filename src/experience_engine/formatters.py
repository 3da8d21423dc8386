"""Markdown formatters, one per section type.

Every formatter takes the validated section and the raw result for it and
returns a block of Markdown lines ending in a blank line. Dispatch goes through
``SECTION_FORMATTERS``; a new section type needs one entry there.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

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
    TextReviewSection,
)
from .normalizers import (
    Endpoint,
    display_text,
    is_approved,
    kanban_column_ids,
    merge_kanban_items,
    normalize_api_builder,
    normalize_choice,
    normalize_numeric_inputs,
    normalize_rank,
    pretty_json,
    resolve_code_selection,
    resolve_connections,
    resolve_image,
    response_status_marker,
)

Formatter = Callable[[Any, Any], str]

LIVE_COMPONENT_LANGUAGE = "tsx"
DEFAULT_CODE_LANGUAGE = "text"


def format_number(value: int | float) -> str:
    """en-US grouping with at most three fraction digits."""
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.3f}".rstrip("0").rstrip(".")
    return f"{int(value):,}"


def _open(section: Any) -> list[str]:
    lines = [f"### {section.title}"] if section.title else []
    lines.append("")
    return lines


def _close(lines: list[str]) -> str:
    lines.append("")
    return "\n".join(lines)


def _fenced(lines: list[str], language: str, body: str) -> None:
    lines.extend([f"```{language}", body, "```"])


def format_info(section: InfoSection, result: Any) -> str:
    lines = _open(section)
    lines.append(f"> {section.content}")
    return _close(lines)


def format_choice(section: ChoiceSection, result: Any) -> str:
    lines = _open(section)
    selected = normalize_choice(section, result)
    if not selected:
        lines.append("*No selections*")
    else:
        lines.extend(f"- {option.label} ({option.id})" for option in selected)
    return _close(lines)


def format_rank(section: RankSection, result: Any) -> str:
    lines = _open(section)
    ranked = normalize_rank(section, result)
    if not ranked:
        lines.append("*No rankings*")
    else:
        lines.extend(f"{index}. {item.label} ({item.id})" for index, item in enumerate(ranked, start=1))
    return _close(lines)


def format_text_review(section: TextReviewSection, result: Any) -> str:
    lines = _open(section)
    if section.content:
        lines.extend([f"> {section.content}", ""])
    if isinstance(result, str) and result.strip():
        lines.extend(["**User Feedback:**", "", result])
    else:
        lines.append("*No feedback provided*")
    return _close(lines)


def format_decision(section: DecisionSection, result: Any) -> str:
    lines = _open(section)
    if is_approved(result):
        lines.append("✅ **Status:** Approved")
    else:
        lines.append("❌ **Status:** Rejected")
    if section.message:
        lines.extend(["", f"*{section.message}*"])
    return _close(lines)


def format_kanban(section: KanbanSection, result: Any) -> str:
    lines = _open(section)
    cards = merge_kanban_items(section, result)
    for column in section.columns:
        lines.append(f"#### {column.label}")
        item_ids = kanban_column_ids(result, column.id)
        if not item_ids:
            lines.append("*No items*")
        for item_id in item_ids:
            card = cards.get(item_id) if isinstance(item_id, str) else None
            if card is None:
                lines.append(f"- {display_text(item_id)}")
                continue
            lines.append(f"- {card.content}")
            if card.description and card.description.strip():
                lines.append(f"  > {card.description}")
        lines.append("")
    return "\n".join(lines)


def format_image_choice(section: ImageChoiceSection, result: Any) -> str:
    lines = _open(section)
    pick = resolve_image(section, result)
    if pick is None:
        lines.append("*No selection*")
    elif pick.label is None:
        lines.append(f"**Selected:** {pick.id}")
    else:
        lines.append(f"**Selected:** {pick.label} ({pick.id})")
    return _close(lines)


def _endpoint_details(lines: list[str], endpoint: Endpoint, *, legacy: bool) -> None:
    # Legacy blocks put the blank line before each part, multi-endpoint blocks after it.
    def part(*content: str) -> None:
        if legacy:
            lines.append("")
            lines.extend(content)
        else:
            lines.extend(content)
            lines.append("")

    if endpoint.description:
        part(endpoint.description)
    if endpoint.path_params:
        part("**Path Parameters:**", *(f"- `{key}` = `{value}`" for key, value in endpoint.path_params))
    if endpoint.query_params:
        part("**Query Parameters:**", *(f"- `{key}` = `{value}`" for key, value in endpoint.query_params))
    if endpoint.headers:
        part("**Headers:**", *(f"- `{key}`: {value}" for key, value in endpoint.headers))
    if endpoint.body is not None:
        part("**Request Body:**", "", "```json", pretty_json(endpoint.body), "```")
    if endpoint.has_response:
        if endpoint.response_code:
            label = f"**Expected Response:** {display_text(endpoint.response_code)}{response_status_marker(endpoint.response_code)}"
        else:
            label = "**Response:**"
        response = [label]
        if endpoint.response_body is not None:
            response.extend(["", "```json", pretty_json(endpoint.response_body), "```"])
        part(*response)


def format_api_builder(section: ApiBuilderSection, result: Any) -> str:
    lines = _open(section)
    api = normalize_api_builder(result)
    if api is None:
        lines.append("*No API defined*")
        return _close(lines)

    if api.legacy:
        endpoint = api.endpoints[0]
        _fenced(lines, "http", f"{endpoint.method} {endpoint.path}")
        _endpoint_details(lines, endpoint, legacy=True)
        return _close(lines)

    if not api.endpoints:
        lines.append("*No endpoints defined*")
        return _close(lines)

    for index, endpoint in enumerate(api.endpoints):
        if index > 0:
            lines.extend(["---", ""])
        request_line = f"{endpoint.method} {endpoint.path}"
        lines.extend([f"#### {request_line}", ""])
        _fenced(lines, "http", request_line)
        lines.append("")
        _endpoint_details(lines, endpoint, legacy=False)
    return "\n".join(lines)


def format_data_mapper(section: DataMapperSection, result: Any) -> str:
    lines = _open(section)
    rows = resolve_connections(section, result)
    if not rows:
        lines.append("*No mappings*")
    else:
        lines.extend(["| Source | Target |", "|--------|--------|"])
        lines.extend(f"| {source} | {target} |" for source, target in rows)
    return _close(lines)


def format_live_component(section: LiveComponentSection, result: Any) -> str:
    lines = _open(section)
    if isinstance(result, str) and result:
        _fenced(lines, LIVE_COMPONENT_LANGUAGE, result)
    else:
        lines.append("*No code generated*")
    return _close(lines)


def format_numeric_inputs(section: NumericInputsSection, result: Any) -> str:
    lines = _open(section)
    entries = normalize_numeric_inputs(section, result)
    if entries is None:
        lines.append("*No values provided*")
        return _close(lines)
    if not entries:
        lines.append("*No items*")
        return _close(lines)

    for entry in entries:
        maximum = f" (max: {format_number(entry.max)})" if entry.max else ""
        lines.append(f"- **{entry.label}:** {format_number(entry.value)}{maximum}")
    total = sum(entry.value for entry in entries)
    lines.extend(["", f"**Total:** {format_number(total)}"])
    return _close(lines)


def _card_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join("" if item is None else display_text(item) for item in value)
    return display_text(value)


def format_card_deck(section: CardDeckSection, result: Any) -> str:
    lines = _open(section)
    cards = [card for card in result if isinstance(card, dict)] if isinstance(result, list) else []
    if not cards:
        lines.append("*No cards created*")
        return "\n".join(lines)

    for number, card in enumerate(cards, start=1):
        lines.extend([f"#### Card {number}", ""])
        lines.extend(f"- **{key}:** {_card_value(value)}" for key, value in card.items() if key != "id")
        lines.append("")
    return "\n".join(lines)


def format_code_selector(section: CodeSelectorSection, result: Any) -> str:
    lines = _open(section)
    selection = resolve_code_selection(section, result)
    if selection is None:
        lines.append("*No selection*")
        return _close(lines)

    lines.extend([f"**Selected:** {selection.label} (`{selection.selected_id}`)", ""])
    _fenced(lines, section.language or DEFAULT_CODE_LANGUAGE, selection.code)
    if selection.modified:
        lines.extend(["", "*Code was modified from original*"])
    return _close(lines)


def format_comment(comment: Any) -> str:
    if not isinstance(comment, str) or not comment.strip():
        return ""
    quoted = "\n> ".join(comment.split("\n"))
    return f"> **Reviewer Comment:**\n> {quoted}\n\n"


def format_unknown(section: Any, result: Any) -> str:
    heading = getattr(section, "title", None) or getattr(section, "id", "section")
    return f"### {heading}\n\n*Unknown section type: {getattr(section, 'type', None)}*\n\n"


SECTION_FORMATTERS: Mapping[str, Formatter] = {
    "info": format_info,
    "choice": format_choice,
    "rank": format_rank,
    "text-review": format_text_review,
    "decision": format_decision,
    "kanban": format_kanban,
    "image-choice": format_image_choice,
    "api-builder": format_api_builder,
    "data-mapper": format_data_mapper,
    "live-component": format_live_component,
    "numeric-inputs": format_numeric_inputs,
    "card-deck": format_card_deck,
    "code-selector": format_code_selector,
}

# Sections whose body is never followed by a reviewer comment.
UNCOMMENTED_SECTION_TYPES = frozenset({"decision"})


__all__ = [
    "Formatter",
    "SECTION_FORMATTERS",
    "UNCOMMENTED_SECTION_TYPES",
    "format_comment",
    "format_number",
    "format_unknown",
]
