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

"""Gemini integration: turns an image and an edit instruction into a prompt."""

from google import genai
from google.genai import errors, types

from common.analytics import get_logger, track_model_call
from common.error_handling import ServiceError
from config.default import Default

cfg = Default()
logger = get_logger(__name__)

DESCRIPTIVE_PROMPT_TEMPLATE = """You are an expert prompt writer for a text-to-image model.
Look carefully at the attached image and at the user's editing request below.
Write a single, detailed prompt that describes the image as it should look AFTER
the edit has been applied: subject, composition, colors, lighting, style, and
background. Preserve everything the user did not ask to change.
Respond with the prompt text only, without any preamble or formatting.

User's editing request: {instruction}"""


def build_descriptive_prompt_contents(
    image_bytes: bytes, mime_type: str, instruction: str
) -> list:
    """Builds the multimodal request contents: inline image, then instructions."""
    return [
        types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        DESCRIPTIVE_PROMPT_TEMPLATE.format(instruction=instruction),
    ]


async def generate_descriptive_prompt(
    client: genai.Client,
    image_bytes: bytes,
    mime_type: str,
    instruction: str,
    model: str | None = None,
) -> str:
    """Asks the vision model for a descriptive prompt of the edited image.

    Args:
        client: An initialized GenAI client.
        image_bytes: Raw bytes of the uploaded image.
        mime_type: MIME type of the uploaded image.
        instruction: The user's editing instruction.
        model: Model ID, defaults to the configured description model.

    Returns:
        The descriptive prompt text.

    Raises:
        ServiceError: If the call fails or returns no text.
    """
    model_name = model or cfg.DESCRIPTION_MODEL
    logger.info(f"Requesting descriptive prompt from {model_name} ({mime_type}, {len(image_bytes)} bytes)")

    try:
        with track_model_call(
            model_name=model_name,
            stage="describe",
            prompt_length=len(instruction),
            mime_type=mime_type,
        ):
            response = await client.aio.models.generate_content(
                model=model_name,
                contents=build_descriptive_prompt_contents(image_bytes, mime_type, instruction),
            )
    except errors.APIError as e:
        raise ServiceError(e.message or str(e)) from e
    except Exception as e:
        raise ServiceError(str(e)) from e

    text = (response.text or "").strip() if response else ""
    if not text:
        raise ServiceError("The model did not return a descriptive prompt.")

    logger.info(f"Descriptive prompt received ({len(text)} chars)")
    return text
