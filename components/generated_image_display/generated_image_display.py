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

from models.pipeline import PipelineStatus


@me.component
def generated_image_display(
    status: str,
    image_url: str,
    descriptive_prompt: str,
    error_message: str,
    generation_time: float = 0.0,
    resolution: str = "",
):
    """Renders the current run: progress, result, or error. Read-only."""
    with me.box(
        style=me.Style(
            display="flex",
            flex_direction="column",
            align_items="center",
            gap=16,
            width="100%",
        )
    ):
        me.text("Generated Image", type="headline-5")

        if status == PipelineStatus.AWAITING_DESCRIPTION.value:
            me.progress_spinner()
            me.text("Analyzing your image and instruction...")
            return

        if status == PipelineStatus.AWAITING_IMAGE.value:
            me.progress_spinner()
            me.text("Generating a new image from the description...")
            _descriptive_prompt(descriptive_prompt)
            return

        if error_message:
            with me.box(
                style=me.Style(
                    background=me.theme_var("error-container"),
                    color=me.theme_var("on-error-container"),
                    padding=me.Padding.all(16),
                    border_radius=8,
                    width="100%",
                )
            ):
                me.text("Error", style=me.Style(font_weight="bold"))
                me.text(error_message)

        if status == PipelineStatus.SUCCEEDED.value and image_url:
            me.image(
                src=image_url,
                alt="Generated image",
                style=me.Style(width="100%", border_radius=12),
            )
            with me.box(style=me.Style(display="flex", flex_direction="row", gap=16)):
                if resolution:
                    me.text(f"Resolution: {resolution}", style=me.Style(font_size=12))
                if generation_time > 0:
                    me.text(f"{generation_time:.2f} seconds", style=me.Style(font_size=12))
            _descriptive_prompt(descriptive_prompt)
            return

        if error_message:
            # The intermediate prompt is still useful context after a stage 2 failure.
            _descriptive_prompt(descriptive_prompt)
            return

        me.text(
            "Your generated image will appear here.",
            style=me.Style(
                padding=me.Padding.all(24),
                color=me.theme_var("on-surface-variant"),
            ),
        )


def _descriptive_prompt(descriptive_prompt: str):
    if not descriptive_prompt:
        return
    with me.box(style=me.Style(width="100%")):
        me.text("Descriptive prompt", style=me.Style(font_weight="bold", font_size=14))
        me.text(descriptive_prompt, style=me.Style(font_size=14, font_style="italic"))
