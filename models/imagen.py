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

"""Imagen integration."""

from google import genai
from google.genai import errors, types

from common.analytics import get_logger, track_model_call
from common.error_handling import ServiceError
from config.default import Default
from config.editor_models import get_image_model_config, resolve_aspect_ratio

cfg = Default()
logger = get_logger(__name__)


async def generate_image_from_prompt(
    client: genai.Client,
    prompt: str,
    model: str | None = None,
    aspect_ratio: str | None = None,
) -> bytes:
    """Generates one image for the prompt and returns its raw bytes."""
    model_name = model or cfg.IMAGE_GEN_MODEL
    model_config = get_image_model_config(model_name)
    output_mime_type = model_config.output_mime_type if model_config else "image/jpeg"
    aspect = resolve_aspect_ratio(model_name, aspect_ratio or cfg.IMAGE_ASPECT_RATIO)

    logger.info(f"Calling generate_images with model: {model_name}, aspect ratio: {aspect}")

    try:
        with track_model_call(
            model_name=model_name,
            stage="generate",
            prompt_length=len(prompt),
            aspect_ratio=aspect,
        ):
            response = await client.aio.models.generate_images(
                model=model_name,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=output_mime_type,
                    aspect_ratio=aspect,
                    include_rai_reason=True,
                ),
            )
    except errors.APIError as e:
        raise ServiceError(e.message or str(e)) from e
    except Exception as e:
        raise ServiceError(str(e)) from e

    generated_images = response.generated_images if response else None
    if not generated_images:
        raise ServiceError("Image generation failed: no images were returned.")

    generated = generated_images[0]
    if generated.image is None or not generated.image.image_bytes:
        reason = getattr(generated, "rai_filtered_reason", None)
        if reason:
            raise ServiceError(f"Content Filtered: {reason}")
        raise ServiceError("Image generation failed: no image bytes were returned.")

    return generated.image.image_bytes
