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

"""Shows whether a Gemini API key is configured."""

import mesop as me

from config.default import ApiKeyStatus


@me.component
def api_key_banner(status: ApiKeyStatus, message: str):
    """A one-line, non-blocking notice under the header.

    Missing or placeholder keys are shown in red; generation stays enabled and
    will fail at the service with its own error.
    """
    is_ready = status == ApiKeyStatus.CONFIGURED
    with me.box(
        style=me.Style(
            display="flex",
            justify_content="center",
            margin=me.Margin(bottom=24),
        )
    ):
        me.text(
            message,
            style=me.Style(
                font_size=14,
                color=me.theme_var("primary") if is_ready else me.theme_var("error"),
            ),
        )
