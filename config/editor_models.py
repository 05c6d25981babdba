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

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ImageGenModelConfig:
    """Configuration for a specific image generation model version."""

    model_name: str  # Full API Model ID (e.g., "imagen-3.0-generate-002")
    display_name: str  # Human-readable name (e.g., "Imagen 3")

    supported_aspect_ratios: List[str] = field(
        default_factory=lambda: ["1:1", "3:4", "4:3", "9:16", "16:9"]
    )
    output_mime_type: str = "image/jpeg"


# Single source of truth
IMAGE_GEN_MODELS: List[ImageGenModelConfig] = [
    ImageGenModelConfig(
        model_name="imagen-3.0-generate-002",
        display_name="Imagen 3",
    ),
    ImageGenModelConfig(
        model_name="imagen-4.0-generate-001",
        display_name="Imagen 4",
    ),
    ImageGenModelConfig(
        model_name="imagen-4.0-fast-generate-001",
        display_name="Imagen 4 Fast",
    ),
]


def get_image_model_config(model_name: str) -> Optional[ImageGenModelConfig]:
    """Finds config by full model name."""
    for model in IMAGE_GEN_MODELS:
        if model.model_name == model_name:
            return model
    return None


def resolve_aspect_ratio(model_name: str, aspect_ratio: str) -> str:
    """Returns the aspect ratio if the model supports it, else the model's first one."""
    model_config = get_image_model_config(model_name)
    if not model_config:
        # Unknown models are passed through; the service rejects bad values.
        return aspect_ratio
    if aspect_ratio in model_config.supported_aspect_ratios:
        return aspect_ratio
    return model_config.supported_aspect_ratios[0]
