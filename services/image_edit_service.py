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
from typing import Callable, Optional

from google import genai

from common.analytics import get_logger
from common.error_handling import ServiceError, ValidationError
from common.utils import decode_base64
from config.default import Default
from models.gemini import generate_descriptive_prompt
from models.imagen import generate_image_from_prompt
from models.pipeline import (
    Failed,
    GenerationPipeline,
    PipelineState,
    Succeeded,
    UploadedImage,
    validate_inputs,
)
from models.requests import (
    DescriptivePromptRequest,
    DescriptivePromptResponse,
    ImageEditRequest,
    ImageEditResponse,
    ImageGenerationRequest,
    ImageGenerationResponse,
)

logger = get_logger(__name__)


def init_client(config: Default) -> genai.Client:
    """Initializes the GenAI client with the configured API key."""
    return genai.Client(api_key=config.API_KEY)


def create_pipeline(
    config: Optional[Default] = None,
    client: Optional[genai.Client] = None,
    on_state_change: Optional[Callable[[PipelineState], None]] = None,
) -> GenerationPipeline:
    """Wires the Gemini and Imagen adapters into a new pipeline."""
    config = config or Default()

    def _client() -> genai.Client:
        # Created on first call so a bad key fails the run, not the page.
        try:
            return client or init_client(config)
        except ValueError as e:
            raise ServiceError(f"Could not initialize the Gemini client: {e}") from e

    async def describe(image_bytes: bytes, mime_type: str, instruction: str) -> str:
        return await generate_descriptive_prompt(
            _client(), image_bytes, mime_type, instruction, model=config.DESCRIPTION_MODEL
        )

    async def generate(prompt: str) -> bytes:
        return await generate_image_from_prompt(
            _client(),
            prompt,
            model=config.IMAGE_GEN_MODEL,
            aspect_ratio=config.IMAGE_ASPECT_RATIO,
        )

    return GenerationPipeline(
        describe=describe,
        generate=generate,
        timeout_seconds=config.GENERATION_TIMEOUT_SECONDS,
        on_state_change=on_state_change,
    )


def to_edit_response(state: PipelineState) -> ImageEditResponse:
    """Projects a final pipeline state onto the API response."""
    response = ImageEditResponse(status=state.status.value)
    if isinstance(state, Succeeded):
        response.descriptive_prompt = state.descriptive_prompt
        response.image_data_uri = state.image.data_uri
    elif isinstance(state, Failed):
        response.descriptive_prompt = state.descriptive_prompt
        response.error_message = state.error_message
    return response


async def run_image_edit(
    request: ImageEditRequest, pipeline: GenerationPipeline
) -> ImageEditResponse:
    """Runs a full edit from an API request.

    Raises ValidationError or ReadError for bad input; service failures come
    back as a FAILED response.
    """
    image = UploadedImage(
        raw_bytes=decode_base64(request.image_data),
        mime_type=request.mime_type,
    )
    final_state = None
    async for state in pipeline.stream(image, request.instruction):
        final_state = state
    logger.info(f"Image edit finished with status {final_state.status.value}")
    return to_edit_response(final_state)


async def describe_image(
    request: DescriptivePromptRequest, pipeline: GenerationPipeline
) -> DescriptivePromptResponse:
    """Runs stage 1 on its own."""
    image = UploadedImage(
        raw_bytes=decode_base64(request.image_data),
        mime_type=request.mime_type,
    )
    instruction = validate_inputs(image, request.instruction)
    text = await pipeline.describe(image.raw_bytes, image.mime_type, instruction)
    return DescriptivePromptResponse(descriptive_text=text)


async def generate_image(
    request: ImageGenerationRequest, pipeline: GenerationPipeline
) -> ImageGenerationResponse:
    """Runs stage 2 on its own."""
    if not request.prompt.strip():
        raise ValidationError("Please provide a prompt.")
    image_bytes = await pipeline.generate(request.prompt)
    return ImageGenerationResponse(
        image_bytes=base64.b64encode(image_bytes).decode("ascii")
    )
