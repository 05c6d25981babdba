# Copyright 2025 Google LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from common.analytics import get_logger
from common.error_handling import ReadError

logger = get_logger(__name__)

ACCEPTED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp"]


def to_data_uri(image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
    """Encodes raw image bytes as a data URI for direct display."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def split_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Splits a data URI into its MIME type and decoded bytes.

    Args:
        data_uri: A string of the form ``data:<mime>;base64,<payload>``.

    Returns:
        A tuple (mime_type, raw_bytes).

    Raises:
        ReadError: If the string is not a base64 data URI.
    """
    if not data_uri or not data_uri.startswith("data:") or "," not in data_uri:
        raise ReadError("Failed to read uploaded image.")
    header, encoded = data_uri.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0]
    return mime_type, decode_base64(encoded)


def decode_base64(encoded: str) -> bytes:
    """Decodes base64 image data, raising ReadError on malformed input."""
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode base64 image data: {e}")
        raise ReadError("Failed to read uploaded image.") from e


def read_upload_bytes(uploaded_file) -> bytes:
    """Fully materializes an uploaded file (a file-like object) into memory."""
    try:
        if hasattr(uploaded_file, "getvalue"):
            data = uploaded_file.getvalue()
        else:
            data = uploaded_file.read()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read uploaded file: {e}")
        raise ReadError("Failed to read uploaded image.") from e
    if not data:
        raise ReadError("Failed to read uploaded image.")
    return data


def get_image_resolution(image_bytes: bytes) -> str:
    """Gets the resolution of an image from its bytes."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return f"{img.width}x{img.height}"
    except (UnidentifiedImageError, OSError) as e:
        logger.info(f"Error getting resolution: {e}")
        return "Unknown"
