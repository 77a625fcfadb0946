"""
HTTP API tests
"""

import httpx
import openai
from starlette.datastructures import UploadFile

from app.config.security import SecurityConfig

DAY = "2025-09-11"
ENGINEER = {"X-Demo-Role": "Engineer"}
MANAGER = {"X-Demo-Role": "Manager"}
# Engineer session acting as Alex Rivera, who reports to mgr-001
ALEX = {"X-Demo-Role": "Engineer", "X-Demo-User": "eng-001"}
LATER = "2030-01-15"


def _connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/test"))


# Health

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["openai"] == {"configured": True}
    assert "timestamp" in data
    assert "python_version" in data["environment"]


def test_health_reports_missing_key(client, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    assert client.get("/health").json()["openai"]["configured"] is False


def test_root(client):
    assert client.get("/").json() == {"message": "LastNext24 API"}


def test_wrong_method_is_json(client):
    response = client.get("/chat")
    assert response.status_code == 405
    assert response.json()["success"] is False


def test_cors_preflight(client):
    response = client.options(
        "/chat",
        headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "https://example.com")


# Chat

def test_chat_requires_query(client):
    response = client.post("/chat", json={"query": "   ", "user_role": "CTO"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Query is required and must not be empty"}


def test_chat_requires_role(client):
    response = client.post("/chat", json={"query": "Any blockers?"})
    assert response.status_code == 400
    assert response.json()["error"] == "User role is required"


def test_chat_answers_with_sources(client, openai_client):
    response = client.post("/chat", json={
        "query": "authentication progress",
        "user_role": "Manager",
        "user_id": "mgr-001",
        "context_date": DAY,
        "max_sources": 2,
    })

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["response"] == "Mocked model answer"
    assert len(data["sources"]) == 2
    assert data["token_count"] == 5
    assert data["processing_time"] >= 0
    assert openai_client.chat.completions.create.await_count == 1


def test_chat_responses_are_cached(client, openai_client):
    body = {"query": "status", "user_role": "CTO", "user_id": "cto-001", "context_date": DAY}

    first = client.post("/chat", json=body)
    second = client.post("/chat", json=body)

    assert first.json()["response"] == second.json()["response"]
    assert openai_client.chat.completions.create.await_count == 1


def test_chat_provider_error(client, openai_client):
    openai_client.chat.completions.create.side_effect = _connection_error()

    response = client.post("/chat", json={"query": "status", "user_role": "CTO", "context_date": DAY})

    assert response.status_code == 500
    assert response.json()["error"].startswith("OpenAI API error during chat:")


def test_chat_unexpected_error(client, openai_client):
    openai_client.chat.completions.create.side_effect = RuntimeError("boom")

    response = client.post("/chat", json={"query": "status", "user_role": "CTO", "context_date": DAY})

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error during chat processing"


# Summarize

def test_summarize_requires_reports(client):
    response = client.post("/summarize", json={"reports": []})
    assert response.status_code == 400
    assert response.json()["error"] == "Reports array is required and must not be empty"


def test_summarize_requires_a_valid_report(client):
    response = client.post("/summarize", json={"reports": ["", "   ", 3]})
    assert response.status_code == 400
    assert response.json()["error"] == "At least one valid report is required"


def test_summarize_rejects_unknown_type(client):
    response = client.post("/summarize", json={"reports": ["ok"], "summary_type": "poem"})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_summarize_aggregate(client, openai_client):
    response = client.post("/summarize", json={"reports": ["Shipped login", ""], "context": "sprint 4"})

    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == "Mocked model answer"
    assert "individual_summaries" not in data
    prompt = openai_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert "Report 1: Shipped login" in prompt
    assert "Report 2" not in prompt


def test_summarize_individual(client, openai_client):
    response = client.post("/summarize", json={"reports": ["a", "b"], "summary_type": "individual"})

    data = response.json()
    assert data["individual_summaries"] == ["Mocked model answer", "Mocked model answer"]
    assert openai_client.chat.completions.create.await_count == 2


# Transcribe

def test_transcribe_without_key(client, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    response = client.post("/transcribe", files={"audio": ("recording.webm", b"abc", "audio/webm")})

    assert response.status_code == 503
    assert response.json()["error"].startswith("Transcription service unavailable")


def test_transcribe_requires_multipart(client):
    response = client.post("/transcribe", json={"audio": "abc"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Content-Type must be multipart/form-data")


def test_transcribe_requires_a_file(client):
    body = (
        b'--boundary\r\nContent-Disposition: form-data; name="note"\r\n\r\n'
        b'no audio here\r\n--boundary--\r\n'
    )
    response = client.post(
        "/transcribe",
        content=body,
        headers={"Content-Type": "multipart/form-data; boundary=boundary"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "No audio file provided"


def test_transcribe_rejects_empty_file(client):
    response = client.post("/transcribe", files={"audio": ("recording.webm", b"", "audio/webm")})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Audio file is empty")


def test_transcribe_rejects_oversized_upload_before_reading(client, monkeypatch):
    monkeypatch.setitem(SecurityConfig.AUDIO_UPLOAD, "max_file_size", 10)

    async def fail_read(self, size=-1):
        raise AssertionError("oversized upload was read into memory")

    monkeypatch.setattr(UploadFile, "read", fail_read)

    response = client.post("/transcribe", files={"audio": ("recording.webm", b"x" * 11, "audio/webm")})
    assert response.status_code == 413
    assert response.json()["error"].startswith("Audio file exceeds maximum allowed size")


def test_transcribe_success(client, openai_client):
    response = client.post("/transcribe", files={"audio": ("recording.webm", b"abc", "audio/webm")})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["transcription"] == "Mocked transcription"
    assert "demo" not in data


def test_transcribe_takes_first_file_from_other_fields(client, openai_client):
    response = client.post("/transcribe", files={"upload": ("clip.wav", b"abc", "audio/wav")})

    assert response.status_code == 200
    kwargs = openai_client.audio.transcriptions.create.call_args.kwargs
    assert kwargs["file"] == ("clip.wav", b"abc", "audio/wav")


def test_transcribe_provider_failure(client, openai_client):
    openai_client.audio.transcriptions.create.side_effect = _connection_error()

    response = client.post("/transcribe", files={"audio": ("recording.webm", b"abc", "audio/webm")})

    assert response.status_code == 502
    assert response.json()["error"].startswith("OpenAI API error during transcription:")


def test_transcribe_demo(client):
    data = client.post("/transcribe/demo").json()
    assert data["demo"] is True
    assert data["duration"] == 1500
    assert data["transcription"].startswith("[DEMO MODE] ")


# Reports

def test_visible_reports(client):
    response = client.get("/reports/visible", params={"role": "Manager", "user_id": "mgr-001", "date": DAY})
    assert sorted(r["id"] for r in response.json()) == ["rpt-001", "rpt-002", "rpt-003"]


def test_visible_reports_requires_role(client):
    assert client.get("/reports/visible").status_code == 400


def test_aggregate_team_reports(client):
    response = client.post("/reports/aggregate", json={"manager_id": "mgr-001", "date": DAY})

    assert response.status_code == 200
    data = response.json()
    assert data["reporting_rate"] == {"reported": 3, "total": 3, "percentage": 100}
    assert data["summary"].startswith("## Team Summary for 9/11/2025")


def test_aggregate_with_ai(client, openai_client):
    response = client.post("/reports/aggregate", json={"manager_id": "mgr-001", "date": DAY, "use_ai": True})

    data = response.json()
    assert data["summary"] == "Mocked model answer"
    assert "## Detailed Team Reports:" in data["aggregated_content"]


def test_aggregate_with_ai_falls_back(client, openai_client):
    openai_client.chat.completions.create.side_effect = _connection_error()

    response = client.post("/reports/aggregate", json={"manager_id": "mgr-001", "date": DAY, "use_ai": True})

    assert response.status_code == 200
    assert response.json()["summary"].startswith("## Team Summary")


def test_aggregate_unknown_manager(client):
    response = client.post("/reports/aggregate", json={"manager_id": "mgr-999", "date": DAY})
    assert response.status_code == 404


def test_format_for_management_level(client):
    content = "## Team Summary for 9/11/2025\nAll good\n\n## Detailed Team Reports:\n\nlots"
    response = client.post("/reports/format", json={"content": content, "from_role": "Manager", "to_role": "VP"})

    assert response.json()["content"] == "## Team Summary for 9/11/2025\nAll good\n"


def test_my_reports_require_a_role(client):
    response = client.get("/reports/mine")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "No user role selected"}


def test_my_reports_crud(client):
    created = client.post("/reports/mine", headers=ENGINEER,
                          json={"title": "Daily", "content": "Finished the export", "date": DAY})
    assert created.status_code == 201
    report = created.json()
    assert report["user_id"] == "user_engineer_demo"

    listed = client.get("/reports/mine", headers=ENGINEER).json()
    assert [r["id"] for r in listed] == [report["id"]]
    assert client.get("/reports/mine", headers=ENGINEER, params={"date": "2025-01-01"}).json() == []

    fetched = client.get(f"/reports/mine/{report['id']}", headers=ENGINEER)
    assert fetched.json()["content"] == "Finished the export"

    updated = client.put(f"/reports/mine/{report['id']}", headers=ENGINEER, json={"content": "Finished and shipped"})
    assert updated.status_code == 200
    assert updated.json()["content"] == "Finished and shipped"

    stats = client.get("/reports/mine/stats", headers=ENGINEER).json()
    assert stats["total_reports"] == 1
    assert stats["current_user_reports"] == 1

    deleted = client.delete(f"/reports/mine/{report['id']}", headers=ENGINEER)
    assert deleted.json()["success"] is True
    assert client.delete(f"/reports/mine/{report['id']}", headers=ENGINEER).status_code == 404


def test_my_reports_are_private(client):
    report = client.post("/reports/mine", headers=ENGINEER, json={"content": "Mine", "date": DAY}).json()

    assert client.get(f"/reports/mine/{report['id']}", headers=MANAGER).status_code == 403
    response = client.put(f"/reports/mine/{report['id']}", headers=MANAGER, json={"content": "Theirs"})
    assert response.status_code == 403
    assert response.json()["error"] == "Not authorized to update this report"
    assert client.delete(f"/reports/mine/{report['id']}", headers=MANAGER).status_code == 403

    assert client.get(f"/reports/mine/{report['id']}", headers=ENGINEER).json()["content"] == "Mine"


def test_my_reports_validation(client):
    response = client.post("/reports/mine", headers=ENGINEER, json={"content": "  ", "date": DAY})
    assert response.status_code == 400

    response = client.post("/reports/mine", headers=ENGINEER, json={"content": "ok", "date": "tomorrow"})
    assert response.status_code == 400


def test_update_missing_report(client):
    response = client.put("/reports/mine/report_0_missing", headers=ENGINEER, json={"content": "x"})
    assert response.status_code == 404


def test_clear_my_storage(client):
    client.post("/reports/mine", headers=ENGINEER, json={"content": "One", "date": DAY})
    client.post("/reports/mine", headers=MANAGER, json={"content": "Two", "date": DAY})

    assert client.delete("/reports/mine", headers=ENGINEER).json() == {"success": True, "removed_keys": 1}
    assert client.get("/reports/mine", headers=MANAGER).json() == []


def test_saved_report_reaches_the_managers_aggregate(client):
    created = client.post("/reports/mine", headers=ALEX,
                          json={"content": "Finished X, blocked on Y", "date": LATER})
    assert created.status_code == 201
    assert created.json()["user_id"] == "eng-001"

    response = client.post("/reports/aggregate", json={"manager_id": "mgr-001", "date": LATER})
    data = response.json()
    assert data["reporting_rate"] == {"reported": 1, "total": 3, "percentage": 33}
    assert data["key_highlights"] == ["✅ Finished X, blocked on Y", "⚠️ Finished X, blocked on Y"]

    visible = client.get("/reports/visible", params={"role": "Manager", "user_id": "mgr-001", "date": LATER})
    assert [r["id"] for r in visible.json()] == [created.json()["id"]]
    # Another manager's team does not include the author
    other = client.get("/reports/visible", params={"role": "Manager", "user_id": "mgr-002", "date": LATER})
    assert other.json() == []


def test_deleted_report_leaves_the_aggregate(client):
    report = client.post("/reports/mine", headers=ALEX, json={"content": "Launched beta", "date": LATER}).json()
    client.delete(f"/reports/mine/{report['id']}", headers=ALEX)

    data = client.post("/reports/aggregate", json={"manager_id": "mgr-001", "date": LATER}).json()
    assert data["reporting_rate"]["reported"] == 0


def test_chat_sees_saved_reports_after_cached_answer(client, openai_client):
    body = {"query": "blocked", "user_role": "Manager", "user_id": "mgr-001", "context_date": LATER}
    assert client.post("/chat", json=body).json()["sources"] == []

    client.post("/reports/mine", headers=ALEX, json={"content": "Still blocked on certificates", "date": LATER})

    sources = client.post("/chat", json=body).json()["sources"]
    assert [s["user_id"] for s in sources] == ["eng-001"]
    assert openai_client.chat.completions.create.await_count == 2


def test_acting_user_must_exist_and_match_role(client):
    response = client.post("/reports/mine", headers={**ENGINEER, "X-Demo-User": "eng-999"},
                           json={"content": "x", "date": DAY})
    assert response.status_code == 400
    assert response.json()["error"] == "Unknown demo user"

    response = client.post("/reports/mine", headers={**MANAGER, "X-Demo-User": "eng-001"},
                           json={"content": "x", "date": DAY})
    assert response.status_code == 403


# Organization

def test_organization_users(client):
    assert len(client.get("/organization/users").json()) == 39
    managers = client.get("/organization/users", params={"role": "manager"}).json()
    assert len(managers) == 8


def test_organization_user_detail(client):
    data = client.get("/organization/users/eng-001").json()
    assert data["user"]["name"] == "Alex Rivera"
    assert data["manager"]["id"] == "mgr-001"
    assert data["direct_reports"] == []
    assert data["level"] == 4

    assert client.get("/organization/users/nobody").status_code == 404


def test_organization_tree_and_scope(client):
    tree = client.get("/organization/tree", params={"role": "CTO"}).json()
    assert tree[0]["id"] == "cto-001"

    scope = client.get("/organization/scope", params={"role": "Engineer", "user_id": "eng-001"}).json()
    assert scope["viewable_user_count"] == 1
    assert scope["scope_description"] == "Can view only own reports"


def test_organization_projects(client):
    projects = client.get("/organization/projects", params={"team_id": "mgr-001"}).json()
    assert len(projects) == 3
    assert len(client.get("/organization/projects").json()) == 24


def test_organization_user_team(client):
    team = client.get("/organization/users/dir-001/team").json()
    assert team["user_id"] == "dir-001"
    assert [m["user_id"] for m in team["subordinates"]] == ["mgr-001", "mgr-002"]
    assert [e["user_id"] for e in team["subordinates"][0]["subordinates"]] == ["eng-001", "eng-002", "eng-003"]
    assert team["subordinates"][0]["subordinates"][0]["subordinates"] == []

    assert client.get("/organization/users/nobody/team").status_code == 404
