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

"""Application configuration, read from the environment at startup."""

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv

from common.analytics import get_logger

load_dotenv(override=True)

logger = get_logger(__name__)

DEFAULT_GENERATION_TIMEOUT_SECONDS = 120.0

PLACEHOLDER_API_KEYS = frozenset(
    {"YOUR_API_KEY", "your-api-key", "<API_KEY>", "changeme"}
)


class ApiKeyStatus(str, Enum):
    MISSING = "MISSING"
    PLACEHOLDER = "PLACEHOLDER"
    CONFIGURED = "CONFIGURED"


API_KEY_STATUS_MESSAGES = {
    ApiKeyStatus.MISSING: "API Key not configured. Please set the GEMINI_API_KEY environment variable.",
    ApiKeyStatus.PLACEHOLDER: "API Key seems to be a placeholder. Please configure it correctly.",
    ApiKeyStatus.CONFIGURED: "Gemini API Ready",
}


def api_key_status(api_key: str | None) -> ApiKeyStatus:
    """Classifies the configured key. Presence check only; the service validates it."""
    if not api_key or not api_key.strip():
        return ApiKeyStatus.MISSING
    if api_key.strip() in PLACEHOLDER_API_KEYS:
        return ApiKeyStatus.PLACEHOLDER
    return ApiKeyStatus.CONFIGURED


def _api_key_from_env() -> str | None:
    return os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")


def _generation_timeout_from_env() -> float:
    raw = os.environ.get("GENERATION_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return DEFAULT_GENERATION_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        logger.warning(
            f"Ignoring GENERATION_TIMEOUT_SECONDS={raw!r}, expected a positive number of "
            f"seconds. Using {DEFAULT_GENERATION_TIMEOUT_SECONDS:g}."
        )
        return DEFAULT_GENERATION_TIMEOUT_SECONDS
    return timeout


@dataclass
class Default:
    """Defaults class"""

    # pylint: disable=invalid-name

    APP_TITLE: str = os.environ.get("APP_TITLE", "AI Image Editor")

    API_KEY: str | None = field(default_factory=_api_key_from_env)

    # Stage 1: image + instruction -> descriptive prompt
    DESCRIPTION_MODEL: str = os.environ.get("DESCRIPTION_MODEL", "gemini-2.5-flash")
    # Stage 2: descriptive prompt -> image
    IMAGE_GEN_MODEL: str = os.environ.get("IMAGE_GEN_MODEL", "imagen-3.0-generate-002")
    IMAGE_ASPECT_RATIO: str = os.environ.get("IMAGE_ASPECT_RATIO", "1:1")

    GENERATION_TIMEOUT_SECONDS: float = field(default_factory=_generation_timeout_from_env)

    @property
    def api_key_status(self) -> ApiKeyStatus:
        return api_key_status(self.API_KEY)

    @property
    def api_key_message(self) -> str:
        return API_KEY_STATUS_MESSAGES[self.api_key_status]
