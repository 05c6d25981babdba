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
import os

import pytest
from PIL import Image

from config.default import Default
from models.pipeline import PipelineStatus, UploadedImage
from services.image_edit_service import create_pipeline

if not os.environ.get("GEMINI_API_KEY"):
    print("Skipping test: GEMINI_API_KEY not set.")
    pytest.skip("GEMINI_API_KEY not set", allow_module_level=True)


def create_dummy_image_bytes():
    """Creates a simple image and returns its JPEG bytes."""
    img = Image.new("RGB", (512, 512), color="blue")
    byte_io = io.BytesIO()
    img.save(byte_io, "JPEG")
    return byte_io.getvalue()


@pytest.mark.integration
def test_live_image_edit():
    """Runs both stages against the live API."""
    statuses = []
    pipeline = create_pipeline(Default(), on_state_change=lambda s: statuses.append(s.status))
    image = UploadedImage(raw_bytes=create_dummy_image_bytes(), mime_type="image/jpeg")

    generated = asyncio.run(pipeline.run(image, "turn the square into a sunset over the sea"))

    print(f"Descriptive prompt: {pipeline.state.descriptive_prompt}")
    assert generated.data_uri.startswith("data:image/jpeg;base64,")
    assert statuses[-1] == PipelineStatus.SUCCEEDED
