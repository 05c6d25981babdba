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

import asyncio
import io
from types import SimpleNamespace

import mesop as me
import pytest
from PIL import Image

from common.error_handling import ServiceError
from models.pipeline import GenerationPipeline
from pages import image_editor
from state.image_editor_state import PageState
from state.state import AppState

ORIGINAL_DATA_URL = "data:image/jpeg;base64,/9j/4AAQ"
PREVIOUS_RESULT_URL = "data:image/jpeg;base64,cHJldmlvdXM="


def jpeg_bytes(width=4, height=3):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color="purple").save(buffer, format="JPEG")
    return buffer.getvalue()


def page_state(**overrides):
    values = dict(
        uploaded_image_data_url="",
        uploaded_image_mime_type="",
        uploaded_image_name="",
        instruction="",
        status="IDLE",
        descriptive_prompt="",
        generated_image_url="",
        error_message="",
        generation_time=0.0,
        generated_resolution="",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def states(monkeypatch):
    """Serves handler state from plain objects instead of a Mesop session."""
    by_class = {
        PageState: page_state(),
        AppState: SimpleNamespace(current_page="image_editor", session_id="session-1"),
    }
    monkeypatch.setattr(me, "state", lambda cls: by_class[cls])
    return by_class


def use_pipeline(monkeypatch, describe_error=None):
    calls = []

    async def describe(image_bytes, mime_type, instruction):
        calls.append((mime_type, instruction))
        if describe_error:
            raise describe_error
        return "A red bicycle on a beach under a purple sky"

    async def generate(prompt):
        return jpeg_bytes()

    monkeypatch.setattr(
        image_editor, "create_pipeline", lambda config: GenerationPipeline(describe, generate)
    )
    return calls


def refuse_pipeline(monkeypatch):
    def create_pipeline(config):
        raise AssertionError("no run should start")

    monkeypatch.setattr(image_editor, "create_pipeline", create_pipeline)


def click_generate(state):
    """Drives the click handler, recording the status at every re-render."""

    async def drain():
        seen = []
        async for _ in image_editor.on_generate_click(SimpleNamespace()):
            seen.append(state.status)
        return seen

    return asyncio.run(drain())


def test_upload_replaces_image_and_clears_results(states):
    state = states[PageState]
    state.status = "SUCCEEDED"
    state.generated_image_url = PREVIOUS_RESULT_URL
    state.descriptive_prompt = "old prompt"
    upload = SimpleNamespace(
        file=SimpleNamespace(getvalue=jpeg_bytes, name="beach.jpg", mime_type="image/jpeg")
    )

    list(image_editor.on_upload(upload))

    assert state.uploaded_image_data_url.startswith("data:image/jpeg;base64,")
    assert state.uploaded_image_name == "beach.jpg"
    assert state.status == "IDLE"
    assert state.generated_image_url == ""
    assert state.descriptive_prompt == ""


def test_unreadable_upload_fails_the_page(states):
    state = states[PageState]
    upload = SimpleNamespace(
        file=SimpleNamespace(getvalue=lambda: b"", name="empty.png", mime_type="image/png")
    )

    list(image_editor.on_upload(upload))

    assert state.status == "FAILED"
    assert state.error_message == "Failed to read uploaded image."
    assert state.uploaded_image_data_url == ""


def test_generate_click_renders_every_transition(states, monkeypatch):
    calls = use_pipeline(monkeypatch)
    state = states[PageState]
    state.uploaded_image_data_url = ORIGINAL_DATA_URL
    state.uploaded_image_mime_type = "image/jpeg"
    state.instruction = " make the sky purple "

    seen = click_generate(state)

    assert seen[:3] == ["AWAITING_DESCRIPTION", "AWAITING_IMAGE", "SUCCEEDED"]
    assert calls == [("image/jpeg", "make the sky purple")]
    assert state.generated_image_url.startswith("data:image/jpeg;base64,")
    assert state.descriptive_prompt == "A red bicycle on a beach under a purple sky"
    assert state.generated_resolution == "4x3"
    assert state.error_message == ""


def test_generate_click_shows_service_failure(states, monkeypatch):
    use_pipeline(monkeypatch, describe_error=ServiceError("API key not valid"))
    state = states[PageState]
    state.uploaded_image_data_url = ORIGINAL_DATA_URL
    state.instruction = "make the sky purple"

    seen = click_generate(state)

    assert seen[:2] == ["AWAITING_DESCRIPTION", "FAILED"]
    assert state.error_message == "API key not valid"
    assert state.generated_image_url == ""


def test_missing_inputs_keep_the_previous_result(states, monkeypatch):
    refuse_pipeline(monkeypatch)
    state = states[PageState]
    state.uploaded_image_data_url = ORIGINAL_DATA_URL
    state.instruction = "   "
    state.status = "SUCCEEDED"
    state.generated_image_url = PREVIOUS_RESULT_URL

    click_generate(state)

    assert state.error_message == image_editor.MISSING_INPUTS_MESSAGE
    assert state.status == "SUCCEEDED"
    assert state.generated_image_url == PREVIOUS_RESULT_URL


def test_typing_clears_the_missing_inputs_message(states, monkeypatch):
    refuse_pipeline(monkeypatch)
    state = states[PageState]
    state.status = "SUCCEEDED"
    state.generated_image_url = PREVIOUS_RESULT_URL
    click_generate(state)
    assert state.error_message

    image_editor.on_instruction_input(SimpleNamespace(value="make the sky purple"))

    assert state.instruction == "make the sky purple"
    assert state.error_message == ""
    assert state.generated_image_url == PREVIOUS_RESULT_URL


def test_typing_keeps_a_run_failure(states):
    state = states[PageState]
    state.status = "FAILED"
    state.error_message = "Content Filtered: unsafe"

    image_editor.on_instruction_input(SimpleNamespace(value="make the sky blue"))

    assert state.error_message == "Content Filtered: unsafe"


def test_clear_resets_everything(states):
    state = states[PageState]
    state.uploaded_image_data_url = ORIGINAL_DATA_URL
    state.instruction = "make the sky purple"
    state.status = "FAILED"
    state.error_message = "quota exceeded"

    image_editor.on_clear_click(SimpleNamespace())

    assert state.uploaded_image_data_url == ""
    assert state.instruction == ""
    assert state.status == "IDLE"
    assert state.error_message == ""
