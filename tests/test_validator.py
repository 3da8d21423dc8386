import pytest

from experience_engine.models.section import ChoiceSection, InfoSection
from experience_engine.registry import (
    SECTION_REGISTRY,
    VALID_SECTION_TYPES,
    is_valid_section_type,
    lookup,
)
from experience_engine.formatters import SECTION_FORMATTERS
from experience_engine.validator import (
    DECISION_COUNT_MESSAGE,
    ValidationFailure,
    ValidationSuccess,
    validate_experience,
)

DECISION = {"id": "sec-decision", "type": "decision", "title": "Decision"}

ALL_SECTIONS = [
    {"id": "s-info", "type": "info", "content": "Hello"},
    {"id": "s-choice", "type": "choice", "options": [{"id": "a", "label": "A"}]},
    {"id": "s-rank", "type": "rank", "items": [{"id": "a", "label": "A"}]},
    {"id": "s-review", "type": "text-review", "content": "Review this"},
    DECISION,
    {
        "id": "s-kanban",
        "type": "kanban",
        "columns": [{"id": "todo", "label": "To Do"}],
        "items": [{"id": "i1", "label": "Item", "columnId": "todo"}],
    },
    {"id": "s-image", "type": "image-choice", "images": [{"id": "x", "src": "/x.png"}]},
    {
        "id": "s-api",
        "type": "api-builder",
        "basePath": "/api/v1",
        "allowedMethods": ["GET", "POST", "PUT", "DELETE"],
        "defaultHeaders": [{"key": "Accept", "value": "application/json"}],
        "responseCodes": [{"code": 200, "label": "OK"}],
        "initialEndpoints": [{"id": "e1", "method": "GET", "path": "/users"}],
        "maxEndpoints": 5,
    },
    {
        "id": "s-mapper",
        "type": "data-mapper",
        "sources": [{"id": "src", "label": "Source"}],
        "targets": [{"id": "dst", "label": "Target"}],
    },
    {"id": "s-live", "type": "live-component", "defaultCode": "<Card className='p-4' />"},
    {
        "id": "s-numeric",
        "type": "numeric-inputs",
        "items": [{"id": "a", "label": "A", "max": 100}, {"id": "b", "label": "B"}],
    },
    {
        "id": "s-cards",
        "type": "card-deck",
        "template": {"name": "", "role": ""},
        "initialCards": [{"id": "c1", "name": "Admin", "role": "Owner"}],
    },
    {
        "id": "s-code",
        "type": "code-selector",
        "language": "python",
        "options": [
            {"id": "a", "label": "Loop", "code": "for x in xs: ..."},
            {"id": "b", "label": "Comprehension", "code": "[x for x in xs]"},
        ],
    },
]


def make_payload(sections, **overrides):
    payload = {"id": "exp-1", "title": "Test", "author": "Tester", "sections": sections}
    payload.update(overrides)
    return payload


def test_minimal_experience_validates():
    result = validate_experience(make_payload([{"id": "s1", "type": "info", "content": "Hi"}, DECISION]))

    assert isinstance(result, ValidationSuccess)
    assert result.success is True
    assert len(result.experience.sections) == 2
    first = result.experience.sections[0]
    assert isinstance(first, InfoSection)
    assert first.content == "Hi"


def test_every_section_type_validates_in_one_experience():
    result = validate_experience(make_payload(ALL_SECTIONS))

    assert result.success, getattr(result, "errors", None)
    types = [section.type for section in result.experience.sections]
    assert sorted(types) == sorted(VALID_SECTION_TYPES)
    numeric = result.experience.sections[10]
    assert numeric.items[0].max == 100
    assert numeric.items[1].max is None
    cards = result.experience.sections[11]
    assert cards.initial_cards[0]["name"] == "Admin"


def test_camel_case_fields_map_to_attributes():
    payload = make_payload(
        [
            {
                "id": "s1",
                "type": "choice",
                "multiSelect": True,
                "allowCustom": True,
                "options": [{"id": "a", "label": "A"}],
            },
            DECISION,
        ]
    )

    result = validate_experience(payload)

    section = result.experience.sections[0]
    assert isinstance(section, ChoiceSection)
    assert section.multi_select is True
    assert section.allow_custom is True


def test_unknown_fields_are_stripped_at_every_level():
    payload = make_payload(
        [
            {
                "id": "s1",
                "type": "choice",
                "unknownSectionField": "x",
                "options": [{"id": "a", "label": "A", "icon": "star"}],
            },
            {**DECISION, "unknownDecisionField": 1},
        ],
        unknownField="dropped",
    )

    result = validate_experience(payload)

    assert result.success
    dumped = result.experience.model_dump(by_alias=True)
    assert "unknownField" not in dumped
    assert "unknownSectionField" not in dumped["sections"][0]
    assert "icon" not in dumped["sections"][0]["options"][0]
    assert "unknownDecisionField" not in dumped["sections"][1]


def test_missing_required_field_fails():
    result = validate_experience(make_payload([{"id": "s1", "type": "info"}, DECISION]))

    assert isinstance(result, ValidationFailure)
    assert result.success is False
    assert any(issue.path[0] == "sections" and issue.path[-1] == "content" for issue in result.errors)


def test_unknown_section_type_fails():
    result = validate_experience(make_payload([{"id": "s1", "type": "carousel"}, DECISION]))

    assert not result.success
    assert result.errors
    assert result.errors[0].path[:2] == ("sections", "0")


@pytest.mark.parametrize(
    "section",
    [
        {"id": "s1", "type": "choice"},
        {"id": "s1", "type": "rank"},
        {"id": "s1", "type": "kanban", "columns": []},
        {"id": "s1", "type": "live-component"},
    ],
)
def test_variant_specific_required_fields(section):
    assert not validate_experience(make_payload([section, DECISION])).success


def test_wrong_primitive_types_are_not_coerced():
    assert not validate_experience(make_payload([DECISION], title=123)).success
    numeric = {"id": "n", "type": "numeric-inputs", "items": [{"id": "a", "label": "A", "max": "100"}]}
    assert not validate_experience(make_payload([numeric, DECISION])).success


def test_code_selector_requires_two_to_five_options():
    option = {"id": "a", "label": "A", "code": "x"}
    too_few = {"id": "c", "type": "code-selector", "options": [option]}
    too_many = {
        "id": "c",
        "type": "code-selector",
        "options": [{**option, "id": str(index)} for index in range(6)],
    }

    assert not validate_experience(make_payload([too_few, DECISION])).success
    assert not validate_experience(make_payload([too_many, DECISION])).success


def test_missing_decision_is_rejected():
    result = validate_experience(make_payload([{"id": "s1", "type": "info", "content": "Hi"}]))

    assert not result.success
    assert len(result.errors) == 1
    issue = result.errors[0]
    assert issue.path == ("sections",)
    assert DECISION_COUNT_MESSAGE in issue.message
    assert "found 0" in issue.message


def test_multiple_decisions_are_rejected():
    second = {**DECISION, "id": "sec-decision-2"}
    result = validate_experience(make_payload([DECISION, second]))

    assert not result.success
    assert DECISION_COUNT_MESSAGE in result.errors[0].message
    assert "found 2" in result.errors[0].message


@pytest.mark.parametrize("raw", [None, "experience", 42, [], {"title": "No id"}])
def test_non_documents_fail_without_raising(raw):
    result = validate_experience(raw)

    assert isinstance(result, ValidationFailure)
    assert result.errors


def test_demo_fixture_validates(demo_payload):
    result = validate_experience(demo_payload)

    assert result.success
    assert result.experience.decision_count == 1


def test_registry_lookup():
    assert lookup("choice").model is ChoiceSection
    assert lookup("choice").type == "choice"
    assert lookup("carousel") is None
    assert is_valid_section_type("code-selector")
    assert not is_valid_section_type("Choice")
    assert len(VALID_SECTION_TYPES) == 13


def test_every_registered_type_has_a_formatter():
    assert set(SECTION_REGISTRY) == set(SECTION_FORMATTERS)
