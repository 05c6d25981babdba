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
import io

import pytest
from PIL import Image

from common.error_handling import ReadError, user_facing_message, GENERIC_FAILURE_MESSAGE
from common.utils import (
    decode_base64,
    get_image_resolution,
    read_upload_bytes,
    split_data_uri,
    to_data_uri,
)


def create_image_bytes(width=64, height=32, fmt="JPEG"):
    img = Image.new("RGB", (width, height), color="purple")
    byte_io = io.BytesIO()
    img.save(byte_io, fmt)
    return byte_io.getvalue()


def test_to_data_uri_uses_jpeg_by_default():
    assert to_data_uri(b"abc") == "data:image/jpeg;base64,YWJj"


def test_split_data_uri():
    mime_type, data = split_data_uri("data:image/png;base64," + base64.b64encode(b"png").decode())
    assert mime_type == "image/png"
    assert data == b"png"


@pytest.mark.parametrize("value", ["", "not a data uri", "data:image/png;base64"])
def test_split_data_uri_rejects_malformed(value):
    with pytest.raises(ReadError):
        split_data_uri(value)


def test_decode_base64_rejects_garbage():
    with pytest.raises(ReadError, match="Failed to read uploaded image."):
        decode_base64("***not base64***")


def test_read_upload_bytes_materializes_file():
    assert read_upload_bytes(io.BytesIO(b"image-bytes")) == b"image-bytes"


def test_read_upload_bytes_rejects_empty_file():
    with pytest.raises(ReadError):
        read_upload_bytes(io.BytesIO(b""))


def test_read_upload_bytes_wraps_io_errors():
    class BrokenFile:
        def read(self):
            raise OSError("disk gone")

    with pytest.raises(ReadError):
        read_upload_bytes(BrokenFile())


def test_get_image_resolution():
    assert get_image_resolution(create_image_bytes(64, 32)) == "64x32"
    assert get_image_resolution(b"not an image") == "Unknown"


def test_user_facing_message():
    assert user_facing_message(ReadError("Failed to read uploaded image.")) == "Failed to read uploaded image."
    assert user_facing_message(RuntimeError("boom")) == "boom"
    assert user_facing_message(RuntimeError()) == GENERIC_FAILURE_MESSAGE
