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

from typing import Optional

from pydantic import BaseModel, Field


class DescriptivePromptRequest(BaseModel):
    """Stage 1 request: the uploaded image plus the user's instruction."""

    image_data: str = Field(..., description="Base64-encoded image bytes.")
    mime_type: str
    instruction: str


class DescriptivePromptResponse(BaseModel):
    descriptive_text: str


class ImageGenerationRequest(BaseModel):
    """Stage 2 request: the descriptive prompt produced by stage 1."""

    prompt: str


class ImageGenerationResponse(BaseModel):
    image_bytes: str = Field(..., description="Base64-encoded image bytes.")


class ImageEditRequest(BaseModel):
    """
    Defines the contract for a full edit run over the JSON API.
    Mirrors what the editor page collects from the user.
    """

    image_data: str = Field(..., description="Base64-encoded image bytes.")
    mime_type: str = "image/jpeg"
    instruction: str = ""


class ImageEditResponse(BaseModel):
    status: str
    descriptive_prompt: Optional[str] = None
    image_data_uri: Optional[str] = None
    error_message: Optional[str] = None
