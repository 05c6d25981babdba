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


@me.component
def header(title: str, icon: str):
    """Page title row."""
    with me.box(
        style=me.Style(
            display="flex",
            flex_direction="row",
            align_items="center",
            justify_content="center",
            gap=12,
            margin=me.Margin(bottom=8),
        )
    ):
        me.icon(icon, style=me.Style(color=me.theme_var("primary"), font_size=36, width=36, height=36))
        me.text(title, type="headline-4", style=me.Style(font_weight="bold"))
