from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
import requests
from fastapi.testclient import TestClient

import server
import utils

_ENV_NAMES = (
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "GENAI_API_KEY",
    "GEMINI_UPSTREAM_BASE_URL",
    "GEMINI_CLI_UPSTREAM_BASE_URL",
    "IMAGE_SUFFIX_FORCE_PREVIEW",
    "UPSTREAM_TIMEOUT_SECONDS",
)


@pytest.fixture(name="client")
def fixture_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    return TestClient(server.app)


@pytest.fixture(name="upstream")
def fixture_upstream(monkeypatch: pytest.MonkeyPatch) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def _fake_post(url, data, headers, params, timeout):
        calls.append({"url": url, "data": data, "headers": headers, "params": params, "timeout": timeout})
        return SimpleNamespace(
            status_code=200,
            content=b'{"candidates": []}',
            headers={"content-type": "application/json"},
        )

    monkeypatch.setattr(utils.requests, "post", _fake_post)
    return calls


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_normalize_endpoint(client: TestClient) -> None:
    response = client.get("/models/normalize", params={"model": "gemini-3-pro-image-4k-16x9"})
    assert response.status_code == 200
    assert response.json() == {
        "model": "gemini-3-pro-image-4k-16x9",
        "base_model": "gemini-3-pro-image-preview",
        "metadata": {
            "image_aspect_ratio": "16:9",
            "image_size": "4K",
            "image_original_model": "gemini-3-pro-image-4k-16x9",
        },
    }


def test_normalize_endpoint_respects_force_preview_setting(client: TestClient, monkeypatch) -> None:
    monkeypatch.setenv("IMAGE_SUFFIX_FORCE_PREVIEW", "false")
    response = client.get("/models/normalize", params={"model": "gemini-3-pro-image-2k"})
    assert response.json()["base_model"] == "gemini-3-pro-image"


def test_normalize_endpoint_unknown_model(client: TestClient) -> None:
    response = client.get("/models/normalize", params={"model": "claude-sonnet-4-5"})
    assert response.json() == {"model": "claude-sonnet-4-5", "base_model": "claude-sonnet-4-5", "metadata": None}


def test_generate_content_rewrites_model_and_injects_image_config(client: TestClient, upstream) -> None:
    body = {"contents": [{"parts": [{"text": "a lighthouse at dusk"}]}]}
    response = client.post(
        "/v1beta/models/gemini-3-pro-image-16-9-4k:generateContent",
        params={"alt": "json"},
        content=json.dumps(body),
    )

    assert response.status_code == 200
    assert response.json() == {"candidates": []}
    assert len(upstream) == 1
    call = upstream[0]
    assert call["url"] == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-3-pro-image-preview:generateContent"
    )
    assert call["params"] == {"alt": "json"}
    assert call["headers"]["x-goog-api-key"] == "env-key"
    assert call["timeout"] == 120.0
    assert json.loads(call["data"]) == {
        "contents": [{"parts": [{"text": "a lighthouse at dusk"}]}],
        "generationConfig": {"imageConfig": {"aspectRatio": "16:9", "imageSize": "4K"}},
    }


def test_generate_content_passes_plain_models_through(client: TestClient, upstream) -> None:
    raw = b'{"contents": []}'
    client.post("/v1beta/models/gemini-2.5-flash:streamGenerateContent", params={"key": "query-key"}, content=raw)

    call = upstream[0]
    assert call["url"].endswith("/v1beta/models/gemini-2.5-flash:streamGenerateContent")
    assert call["data"] == raw
    assert call["params"] == {}
    assert call["headers"]["x-goog-api-key"] == "query-key"


def test_generate_content_forwards_bearer_token(client: TestClient, upstream, monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    client.post(
        "/v1beta/models/gemini-3-pro-image-1k:generateContent",
        headers={"Authorization": "Bearer tok"},
        content=b"{}",
    )
    headers = upstream[0]["headers"]
    assert headers["Authorization"] == "Bearer tok"
    assert "x-goog-api-key" not in headers


def test_generate_content_requires_credentials(client: TestClient, upstream, monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    response = client.post("/v1beta/models/gemini-3-pro-image-1k:generateContent", content=b"{}")
    assert response.status_code == 500
    assert response.json() == {"detail": "Missing Gemini API key"}
    assert upstream == []


def test_generate_content_relays_upstream_errors(client: TestClient, monkeypatch) -> None:
    def _fake_post(url, data, headers, params, timeout):
        return SimpleNamespace(
            status_code=429,
            content=b'{"error": {"code": 429}}',
            headers={"content-type": "application/json"},
        )

    monkeypatch.setattr(utils.requests, "post", _fake_post)
    response = client.post("/v1beta/models/gemini-3-pro-image-2k:generateContent", content=b"{}")
    assert response.status_code == 429
    assert response.json() == {"error": {"code": 429}}


def test_generate_content_maps_transport_failure_to_502(client: TestClient, monkeypatch) -> None:
    def _fake_post(url, data, headers, params, timeout):
        raise requests.ConnectionError("boom")

    monkeypatch.setattr(utils.requests, "post", _fake_post)
    response = client.post("/v1beta/models/gemini-3-pro-image-2k:generateContent", content=b"{}")
    assert response.status_code == 502
    assert response.json() == {"detail": "Upstream request failed"}


def test_cli_envelope_rewrites_model_and_injects_under_request(client: TestClient, upstream, monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_CLI_UPSTREAM_BASE_URL", "http://upstream.test/")
    body = {"model": "gemini-3-pro-image-9x16", "project": "proj-1", "request": {"contents": []}}
    response = client.post("/v1internal:generateContent", content=json.dumps(body))

    assert response.status_code == 200
    call = upstream[0]
    assert call["url"] == "http://upstream.test/v1internal:generateContent"
    assert json.loads(call["data"]) == {
        "model": "gemini-3-pro-image-preview",
        "project": "proj-1",
        "request": {
            "contents": [],
            "generationConfig": {"imageConfig": {"aspectRatio": "9:16"}},
        },
    }


def test_cli_envelope_requires_model(client: TestClient, upstream) -> None:
    assert client.post("/v1internal:generateContent", content=b"not json").status_code == 400
    assert client.post("/v1internal:streamGenerateContent", content=b'{"request": {}}').status_code == 400
    assert upstream == []


@pytest.mark.parametrize("encoding", ["utf-16", "utf-32", "utf-8-sig"])
def test_cli_envelope_rejects_non_utf8_bodies(client: TestClient, upstream, encoding: str) -> None:
    body = json.dumps({"model": "gemini-3-pro-image-16-9", "request": {}}).encode(encoding)
    response = client.post("/v1internal:generateContent", content=body)
    assert response.status_code == 400
    assert response.json() == {"detail": "Request body must be JSON"}
    assert upstream == []
