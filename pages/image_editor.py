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
"""AI Image Editor: upload an image, describe an edit, get a new image."""

import time
import uuid

import mesop as me

from common.analytics import analytics_logger, log_page_view, log_ui_click, track_click
from common.error_handling import ReadError, ValidationError
from common.utils import (
    ACCEPTED_IMAGE_TYPES,
    get_image_resolution,
    read_upload_bytes,
    split_data_uri,
    to_data_uri,
)
from components.api_key_banner.api_key_banner import api_key_banner
from components.generated_image_display.generated_image_display import (
    generated_image_display,
)
from components.header.header import header
from config.default import Default
from models.pipeline import PipelineStatus, Succeeded, UploadedImage
from services.image_edit_service import create_pipeline
from state.image_editor_state import (
    PageState,
    apply_pipeline_state,
    can_submit,
    is_generating,
    submit_button_label,
)
from state.state import AppState

cfg = Default()

PAGE_NAME = "image_editor"
MISSING_INPUTS_MESSAGE = "Please upload an image and provide an editing prompt."

PANEL_STYLE = me.Style(
    background=me.theme_var("surface-container-lowest"),
    padding=me.Padding.all(24),
    border_radius=12,
    flex_grow=1,
    flex_basis=0,
    min_width=320,
)


def image_editor_page_content():
    """Renders the main UI for the Image Editor page."""
    state = me.state(PageState)

    with me.box(
        style=me.Style(
            display="flex",
            flex_direction="column",
            align_items="center",
            padding=me.Padding.all(24),
        )
    ):
        header(cfg.APP_TITLE, "auto_awesome")
        api_key_banner(status=cfg.api_key_status, message=cfg.api_key_message)

        with me.box(
            style=me.Style(
                display="flex",
                flex_direction="row",
                flex_wrap="wrap",
                gap=24,
                width="100%",
                max_width=1100,
            )
        ):
            # Left column (inputs)
            with me.box(style=PANEL_STYLE):
                me.uploader(
                    label="Upload Image",
                    accepted_file_types=ACCEPTED_IMAGE_TYPES,
                    on_upload=on_upload,
                    type="flat",
                    color="primary",
                    disabled=is_generating(state),
                    style=me.Style(width="100%"),
                )

                if state.uploaded_image_data_url:
                    me.image(
                        src=state.uploaded_image_data_url,
                        alt=state.uploaded_image_name,
                        style=me.Style(
                            width="100%",
                            border_radius=8,
                            margin=me.Margin(top=16, bottom=16),
                        ),
                    )

                    me.textarea(
                        label="Describe your edit (e.g. make the sky purple)",
                        rows=3,
                        max_rows=10,
                        autosize=True,
                        value=state.instruction,
                        on_input=on_instruction_input,
                        style=me.Style(width="100%"),
                    )

                    with me.box(
                        style=me.Style(
                            display="flex",
                            flex_direction="row",
                            align_items="center",
                            gap=16,
                        )
                    ):
                        with me.content_button(
                            type="raised",
                            on_click=on_generate_click,
                            disabled=not can_submit(state),
                        ):
                            with me.box(
                                style=me.Style(
                                    display="flex",
                                    flex_direction="row",
                                    align_items="center",
                                    gap=8,
                                )
                            ):
                                if is_generating(state):
                                    me.progress_spinner(diameter=20, stroke_width=3)
                                else:
                                    me.icon("auto_awesome")
                                me.text(submit_button_label(state))
                        with me.content_button(
                            on_click=on_clear_click,
                            type="icon",
                            disabled=is_generating(state),
                        ):
                            me.icon("delete_sweep")

            # Right column (result)
            with me.box(style=PANEL_STYLE):
                generated_image_display(
                    status=state.status,
                    image_url=state.generated_image_url,
                    descriptive_prompt=state.descriptive_prompt,
                    error_message=state.error_message,
                    generation_time=state.generation_time,
                    resolution=state.generated_resolution,
                )

        me.text(
            "Powered by the Google Gemini API.",
            style=me.Style(
                margin=me.Margin(top=32),
                font_size=12,
                color=me.theme_var("on-surface-variant"),
            ),
        )


def _clear_results(state: PageState):
    state.status = PipelineStatus.IDLE.value
    state.descriptive_prompt = ""
    state.generated_image_url = ""
    state.error_message = ""
    state.generation_time = 0.0
    state.generated_resolution = ""


def on_upload(e: me.UploadEvent):
    """Replaces the uploaded image and discards the previous run's results."""
    state = me.state(PageState)
    _clear_results(state)

    try:
        raw_bytes = read_upload_bytes(e.file)
    except ReadError as ex:
        analytics_logger.error(f"Failed to read upload {e.file.name}: {ex}")
        state.uploaded_image_data_url = ""
        apply_pipeline_state(state, create_pipeline(cfg).fail(ex))
        yield
        return

    state.uploaded_image_mime_type = e.file.mime_type
    state.uploaded_image_name = e.file.name
    state.uploaded_image_data_url = to_data_uri(raw_bytes, e.file.mime_type)
    yield


def on_instruction_input(e: me.InputEvent):
    state = me.state(PageState)
    state.instruction = e.value
    # Outside FAILED the only message is the missing-inputs one.
    if state.status != PipelineStatus.FAILED.value:
        state.error_message = ""


async def on_generate_click(e: me.ClickEvent):
    """Runs the describe-then-generate pipeline, re-rendering after each step."""
    state = me.state(PageState)
    app_state = me.state(AppState)
    log_ui_click(
        element_id="generate_edited_image",
        page_name=app_state.current_page,
        session_id=app_state.session_id,
    )

    if not state.uploaded_image_data_url or not state.instruction.strip():
        state.error_message = MISSING_INPUTS_MESSAGE
        yield
        return

    pipeline = create_pipeline(cfg)
    try:
        mime_type, raw_bytes = split_data_uri(state.uploaded_image_data_url)
    except ReadError as ex:
        apply_pipeline_state(state, pipeline.fail(ex))
        yield
        return

    image = UploadedImage(
        raw_bytes=raw_bytes,
        mime_type=state.uploaded_image_mime_type or mime_type,
        preview_reference=state.uploaded_image_data_url,
    )

    state.generation_time = 0.0
    state.generated_resolution = ""
    start_time = time.time()
    try:
        async for pipeline_state in pipeline.stream(image, state.instruction):
            apply_pipeline_state(state, pipeline_state)
            yield
    except ValidationError as ex:
        state.error_message = ex.message
        yield
        return

    final_state = pipeline.state
    if isinstance(final_state, Succeeded):
        state.generation_time = time.time() - start_time
        state.generated_resolution = get_image_resolution(final_state.image.image_bytes)
    yield


@track_click(element_id="clear_image_editor")
def on_clear_click(e: me.ClickEvent):
    """Resets the page."""
    state = me.state(PageState)
    _clear_results(state)
    state.uploaded_image_data_url = ""
    state.uploaded_image_mime_type = ""
    state.uploaded_image_name = ""
    state.instruction = ""


def on_load(e: me.LoadEvent):
    """Records the page view and starts a session."""
    app_state = me.state(AppState)
    me.set_theme_mode(app_state.theme_mode)
    if not app_state.session_id:
        app_state.session_id = str(uuid.uuid4())
    app_state.current_page = PAGE_NAME
    log_page_view(page_name=PAGE_NAME, session_id=app_state.session_id)
    yield


@me.page(
    path="/",
    title="AI Image Editor",
    on_load=on_load,
)
def page():
    """Define the Mesop page route for the Image Editor."""
    image_editor_page_content()
