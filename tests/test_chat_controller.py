"""Tests for the HTTP surface: ``/api/chat`` and ``/api/health``."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

import src.utils.error_handler as error_handler
from src.config.app_config import AppConfig, get_app_config
from src.config.llm_config import LlmConfig
from src.main import create_app
from src.models import RateLimited, Success, Unauthorized, UpstreamPayload
from src.services.chat_mediator import ChatMediator, get_chat_mediator


class _StubUpstream:
    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.payloads: list[UpstreamPayload] = []

    async def complete(self, payload: UpstreamPayload):
        self.payloads.append(payload)
        return self.outcome


class _ExplodingMediator:
    async def handle(self, request):
        raise RuntimeError("mediator bug")


def _app_config(**overrides: object) -> AppConfig:
    return AppConfig(_env_file=None, **overrides)


def _client(mediator, app_config: AppConfig | None = None) -> TestClient:
    app_config = app_config or _app_config()
    app = create_app(app_config=app_config, llm_config=LlmConfig(_env_file=None, api_key="gsk_test"))
    app.dependency_overrides[get_chat_mediator] = lambda: mediator
    app.dependency_overrides[get_app_config] = lambda: app_config
    return TestClient(app, raise_server_exceptions=False)


def _mediator(outcome) -> tuple[ChatMediator, _StubUpstream]:
    upstream = _StubUpstream(outcome)
    mediator = ChatMediator(upstream=upstream, llm_config=LlmConfig(_env_file=None, api_key="gsk_test"))
    return mediator, upstream


def test_json_message_returns_ai_reply() -> None:
    mediator, upstream = _mediator(Success("Sure thing."))
    client = _client(mediator)

    response = client.post("/api/chat", json={"message": "  Help me  "})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["response"] == "Sure thing."
    assert "timestamp" in body
    assert "note" not in body
    assert upstream.payloads[0].user_content == "Help me"


def test_empty_message_is_rejected() -> None:
    mediator, upstream = _mediator(Success("unused"))
    client = _client(mediator)

    response = client.post("/api/chat", json={"message": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Message or file attachment is required"}
    assert upstream.payloads == []


def test_missing_body_is_rejected() -> None:
    mediator, _ = _mediator(Success("unused"))

    response = _client(mediator).post("/api/chat")

    assert response.status_code == 400


def test_multipart_attachment_without_text() -> None:
    mediator, upstream = _mediator(Success("Nice cat."))
    client = _client(mediator)

    response = client.post(
        "/api/chat",
        data={"message": "", "attachment_0_type": "image"},
        files={"attachment_0": ("cat.png", b"\x89PNG....", "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["response"] == "Nice cat."
    assert upstream.payloads[0].user_content == "\n[User attached 1 file(s): cat.png]"


def test_multipart_lists_every_file() -> None:
    mediator, upstream = _mediator(Success("ok"))
    client = _client(mediator)

    response = client.post(
        "/api/chat",
        data={"message": "Compare these"},
        files=[
            ("attachment_0", ("notes.txt", b"some notes", "text/plain")),
            ("attachment_1", ("clip.mp3", b"ID3....", "audio/mpeg")),
        ],
    )

    assert response.status_code == 200
    assert upstream.payloads[0].user_content == (
        "Compare these\n[User attached 2 file(s): notes.txt, clip.mp3]"
    )


def test_disallowed_file_type_is_rejected() -> None:
    mediator, upstream = _mediator(Success("unused"))

    response = _client(mediator).post(
        "/api/chat",
        data={"message": "run this"},
        files={"attachment_0": ("tool.exe", b"MZ", "application/octet-stream")},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid file type")
    assert upstream.payloads == []


def test_oversized_file_is_rejected() -> None:
    mediator, _ = _mediator(Success("unused"))
    client = _client(mediator, _app_config(max_upload_bytes=4))

    response = client.post(
        "/api/chat",
        data={"message": "big"},
        files={"attachment_0": ("photo.jpg", b"0123456789", "image/jpeg")},
    )

    assert response.status_code == 400
    assert "exceeds" in response.json()["error"]


def test_rejected_api_key_returns_401() -> None:
    mediator, _ = _mediator(Unauthorized())

    response = _client(mediator).post("/api/chat", json={"message": "hello"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid upstream API key"}


def test_rate_limit_returns_fallback_with_note() -> None:
    mediator, _ = _mediator(RateLimited())

    response = _client(mediator).post("/api/chat", json={"message": "Who is PM of India?"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "Rate limit reached" in body["note"]
    assert "Narendra Modi" in body["response"]


def test_internal_error_hides_details_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(error_handler, "get_app_config", lambda: _app_config(app_env="production"))

    response = _client(_ExplodingMediator()).post("/api/chat", json={"message": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_internal_error_shows_details_in_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(error_handler, "get_app_config", lambda: _app_config(app_env="development"))

    response = _client(_ExplodingMediator()).post("/api/chat", json={"message": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "details": "mediator bug"}


def test_health_endpoint() -> None:
    mediator, _ = _mediator(Success("unused"))
    client = _client(mediator)

    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Server is running!"
    assert "timestamp" in body


def test_health_rejects_other_methods() -> None:
    mediator, _ = _mediator(Success("unused"))

    response = _client(mediator).post("/api/health")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


def test_unknown_path_returns_404() -> None:
    mediator, _ = _mediator(Success("unused"))

    response = _client(mediator).get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found"}


@pytest.mark.parametrize(
    ("filename", "mime_type"),
    [("p.jpg", "image/jpg"), ("voice.mp4", "audio/mp4")],
)
def test_common_alias_mime_types_are_accepted(filename: str, mime_type: str) -> None:
    mediator, upstream = _mediator(Success("ok"))

    response = _client(mediator).post(
        "/api/chat",
        data={"message": "see attached"},
        files={"attachment_0": (filename, b"data", mime_type)},
    )

    assert response.status_code == 200
    assert upstream.payloads[0].user_content.endswith(f"[User attached 1 file(s): {filename}]")


def test_uploaded_files_are_closed_after_request(monkeypatch: pytest.MonkeyPatch) -> None:
    closed: list[str | None] = []
    original_close = UploadFile.close

    async def _recording_close(self: UploadFile) -> None:
        closed.append(self.filename)
        await original_close(self)

    monkeypatch.setattr(UploadFile, "close", _recording_close)
    mediator, _ = _mediator(Success("ok"))

    response = _client(mediator).post(
        "/api/chat",
        data={"message": "look"},
        files={"attachment_0": ("cat.png", b"\x89PNG....", "image/png")},
    )

    assert response.status_code == 200
    assert "cat.png" in closed
