# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import base64

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from common.error_handling import ServiceError
from models.pipeline import GenerationPipeline
from routers.image_edit_router import get_pipeline, router

JPEG_BYTES = b"\xff\xd8\xff\xe0original"
NEW_JPEG_BYTES = b"\xff\xd8\xff\xe0generated"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def make_client(describe_error=None, generate_error=None):
    calls = {"describe": 0, "generate": 0}

    async def describe(image_bytes, mime_type, instruction):
        calls["describe"] += 1
        if describe_error:
            raise describe_error
        return f"A red bicycle on a beach, {instruction}"

    async def generate(prompt):
        calls["generate"] += 1
        if generate_error:
            raise generate_error
        return NEW_JPEG_BYTES

    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_pipeline] = lambda: GenerationPipeline(describe, generate)
    return TestClient(app), calls


def test_generate_returns_data_uri():
    client, calls = make_client()

    response = client.post(
        "/api/image_edit/generate",
        json={"image_data": b64(JPEG_BYTES), "mime_type": "image/jpeg", "instruction": "make the sky purple"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "SUCCEEDED"
    assert body["image_data_uri"] == "data:image/jpeg;base64," + b64(NEW_JPEG_BYTES)
    assert body["descriptive_prompt"] == "A red bicycle on a beach, make the sky purple"
    assert body["error_message"] is None
    assert calls == {"describe": 1, "generate": 1}


@pytest.mark.parametrize(
    "payload",
    [
        {"image_data": b64(JPEG_BYTES), "instruction": "   "},
        {"image_data": "", "instruction": "make the sky purple"},
        {"image_data": "%%%", "instruction": "make the sky purple"},
    ],
)
def test_generate_rejects_bad_input_before_any_call(payload):
    client, calls = make_client()

    response = client.post("/api/image_edit/generate", json=payload)

    assert response.status_code == 400
    assert calls == {"describe": 0, "generate": 0}


def test_generate_reports_service_failure():
    client, calls = make_client(describe_error=ServiceError("Quota exceeded"))

    response = client.post(
        "/api/image_edit/generate",
        json={"image_data": b64(JPEG_BYTES), "instruction": "make the sky purple"},
    )

    assert response.status_code == 502
    body = response.json()
    assert body["status"] == "FAILED"
    assert body["error_message"] == "Quota exceeded"
    assert body["image_data_uri"] is None
    assert calls["generate"] == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"image_data": "", "instruction": "make the sky purple"},
        {"image_data": b64(JPEG_BYTES), "instruction": "   "},
    ],
)
def test_describe_rejects_missing_inputs_before_any_call(payload):
    client, calls = make_client()

    response = client.post("/api/image_edit/describe", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Please upload an image and provide an editing prompt."
    assert calls == {"describe": 0, "generate": 0}


def test_describe_stage_only():
    client, calls = make_client()

    response = client.post(
        "/api/image_edit/describe",
        json={"image_data": b64(JPEG_BYTES), "mime_type": "image/jpeg", "instruction": "make the sky purple"},
    )

    assert response.status_code == 200
    assert response.json() == {"descriptive_text": "A red bicycle on a beach, make the sky purple"}
    assert calls == {"describe": 1, "generate": 0}


def test_generate_image_stage_only():
    client, _ = make_client()

    response = client.post("/api/image_edit/generate_image", json={"prompt": "A red bicycle"})

    assert response.status_code == 200
    assert base64.b64decode(response.json()["image_bytes"]) == NEW_JPEG_BYTES


def test_generate_image_stage_failure():
    client, _ = make_client(generate_error=ServiceError("Content Filtered: unsafe"))

    response = client.post("/api/image_edit/generate_image", json={"prompt": "A red bicycle"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Content Filtered: unsafe"


def test_status_does_not_leak_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret-key-value")
    client, _ = make_client()

    response = client.get("/api/image_edit/status")

    assert response.status_code == 200
    body = response.json()
    assert body["api_key_status"] == "CONFIGURED"
    assert "secret-key-value" not in response.text
