import pytest
from fastapi.testclient import TestClient

from experience_engine.http_app import create_app, extract_submission
from experience_engine.validator import validate_experience


@pytest.fixture
def experience(demo_payload):
    return validate_experience(demo_payload).experience


@pytest.fixture
def client(experience):
    return TestClient(create_app(experience=experience))


@pytest.fixture
def empty_client():
    return TestClient(create_app())


def test_health(empty_client):
    response = empty_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_validate_returns_normalized_document(empty_client, demo_payload):
    response = empty_client.post("/v1/experiences:validate", json=demo_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["errors"] == []
    assert "schemaVersion" not in body["experience"]
    assert body["experience"]["sections"][-1]["type"] == "decision"
    assert "icon" not in body["experience"]["sections"][0]


def test_validate_reports_issues(empty_client):
    payload = {"id": "x", "title": "X", "author": "A", "sections": []}

    response = empty_client.post("/v1/experiences:validate", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["experience"] is None
    assert body["errors"][0]["path"] == ["sections"]
    assert "exactly one DecisionSection" in body["errors"][0]["message"]


def test_validate_rejects_malformed_json(empty_client):
    response = empty_client.post(
        "/v1/experiences:validate",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_compile_summary(empty_client, demo_payload, demo_results):
    response = empty_client.post(
        "/v1/summaries:compile",
        json={"experience": demo_payload, "results": demo_results, "comments": {"framework": "Check licensing"}},
    )

    assert response.status_code == 200
    markdown = response.json()["markdown"]
    assert markdown.startswith("# Dashboard Kickoff\n\n*By Platform Team*\n\n")
    assert "> **Reviewer Comment:**\n> Check licensing" in markdown
    assert "✅ **Status:** Approved" in markdown


def test_compile_invalid_experience_is_unprocessable(empty_client):
    response = empty_client.post("/v1/summaries:compile", json={"experience": {"id": "x"}, "results": {}})

    assert response.status_code == 422
    assert response.json()["detail"]


def test_experience_route_without_document(empty_client):
    assert empty_client.get("/v1/experience").status_code == 404
    assert empty_client.post("/v1/submit", json={}).status_code == 404


def test_experience_route_serves_loaded_document(client):
    response = client.get("/v1/experience")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "demo-exp-1"
    assert body["sections"][1]["options"][0] == {"id": "react", "label": "React"}


def test_submit_with_answers_and_comments(client, demo_results):
    response = client.post("/v1/submit", json={"answers": demo_results, "comments": {"budget": "Too low"}})

    assert response.status_code == 200
    markdown = response.json()["markdown"]
    assert "**Total:** 1,575" in markdown
    assert "> **Reviewer Comment:**\n> Too low" in markdown


def test_submit_accepts_bare_results(client):
    response = client.post("/v1/submit", json={"final": "yes", "framework": "vue"})

    assert response.status_code == 200
    markdown = response.json()["markdown"]
    assert "- Vue (vue)" in markdown
    assert "✅ **Status:** Approved" in markdown


def test_submit_rejects_non_object(client):
    response = client.post("/v1/submit", json=["final"])

    assert response.status_code == 400


def test_trace_header_is_accepted(client):
    response = client.get("/health", headers={"X-Cloud-Trace-Context": "abc123/1;o=1"})

    assert response.status_code == 200


def test_extract_submission_precedence():
    answers = {"a": 1}
    result = {"b": 2}

    assert extract_submission({"answers": answers, "result": result}) == (answers, None)
    assert extract_submission({"answers": "nope", "result": result}) == (result, None)
    body = {"a": 1, "comments": {"a": "note"}}
    assert extract_submission(body) == (body, {"a": "note"})


def test_validate_rejects_json_nested_too_deeply(empty_client):
    response = empty_client.post(
        "/v1/experiences:validate",
        content="[" * 100000 + "]" * 100000,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
