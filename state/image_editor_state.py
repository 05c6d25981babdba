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

import mesop as me

from models.pipeline import (
    IN_FLIGHT_STATUSES,
    Failed,
    PipelineState,
    PipelineStatus,
    Succeeded,
)


@me.stateclass
class PageState:
    """Image Editor Page State"""

    # The upload is kept as a data URL; it doubles as the preview.
    uploaded_image_data_url: str = ""
    uploaded_image_mime_type: str = ""
    uploaded_image_name: str = ""

    instruction: str = ""

    # Display projection of the pipeline state
    status: str = PipelineStatus.IDLE.value
    descriptive_prompt: str = ""
    generated_image_url: str = ""
    error_message: str = ""

    generation_time: float = 0.0
    generated_resolution: str = ""


def apply_pipeline_state(page_state, pipeline_state: PipelineState):
    """Copies a pipeline state onto the page, clearing fields it does not carry."""
    page_state.status = pipeline_state.status.value
    page_state.descriptive_prompt = getattr(pipeline_state, "descriptive_prompt", None) or ""
    page_state.generated_image_url = (
        pipeline_state.image.data_uri if isinstance(pipeline_state, Succeeded) else ""
    )
    page_state.error_message = (
        pipeline_state.error_message if isinstance(pipeline_state, Failed) else ""
    )


def is_generating(page_state) -> bool:
    return page_state.status in {s.value for s in IN_FLIGHT_STATUSES}


def can_submit(page_state) -> bool:
    """The trigger is enabled only with both inputs present and no run in flight."""
    return (
        bool(page_state.uploaded_image_data_url)
        and bool(page_state.instruction.strip())
        and not is_generating(page_state)
    )


def submit_button_label(page_state) -> str:
    if page_state.status == PipelineStatus.AWAITING_DESCRIPTION.value:
        return "Analyzing Image & Prompt..."
    if page_state.status == PipelineStatus.AWAITING_IMAGE.value:
        return "Generating Image..."
    return "Generate Edited Image"
