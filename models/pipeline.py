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

"""Two-stage image editing pipeline.

A run sends the uploaded image and the user's instruction to a vision model
to get a descriptive prompt, then sends that prompt to an image generation
model. The pipeline state is a closed set of variants, each carrying only the
data valid for it.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Optional, Union

from common.analytics import get_logger
from common.error_handling import (
    GenerationError,
    ServiceError,
    ValidationError,
    user_facing_message,
)
from common.utils import to_data_uri

logger = get_logger(__name__)

DescribeFn = Callable[[bytes, str, str], Awaitable[str]]
GenerateFn = Callable[[str], Awaitable[bytes]]


class PipelineStatus(str, Enum):
    IDLE = "IDLE"
    AWAITING_DESCRIPTION = "AWAITING_DESCRIPTION"
    AWAITING_IMAGE = "AWAITING_IMAGE"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class UploadedImage:
    """An image fully read into memory. Replaced wholesale on re-upload."""

    raw_bytes: bytes
    mime_type: str
    preview_reference: str = ""


@dataclass(frozen=True)
class GeneratedImage:
    image_bytes: bytes
    mime_type: str = "image/jpeg"

    @property
    def data_uri(self) -> str:
        return to_data_uri(self.image_bytes, self.mime_type)


@dataclass(frozen=True)
class Idle:
    status = PipelineStatus.IDLE


@dataclass(frozen=True)
class AwaitingDescription:
    status = PipelineStatus.AWAITING_DESCRIPTION


@dataclass(frozen=True)
class AwaitingImage:
    descriptive_prompt: str
    status = PipelineStatus.AWAITING_IMAGE


@dataclass(frozen=True)
class Succeeded:
    descriptive_prompt: str
    image: GeneratedImage
    status = PipelineStatus.SUCCEEDED


@dataclass(frozen=True)
class Failed:
    error_message: str
    # Kept for transparency when stage 2 fails; the run is still a failure.
    descriptive_prompt: Optional[str] = None
    error: Optional[Exception] = field(default=None, compare=False, repr=False)
    status = PipelineStatus.FAILED


PipelineState = Union[Idle, AwaitingDescription, AwaitingImage, Succeeded, Failed]

IN_FLIGHT_STATUSES = (
    PipelineStatus.AWAITING_DESCRIPTION,
    PipelineStatus.AWAITING_IMAGE,
)


def validate_inputs(image: Optional[UploadedImage], instruction: Optional[str]) -> str:
    """Checks run preconditions and returns the trimmed instruction."""
    if image is None or not image.raw_bytes:
        raise ValidationError("Please upload an image and provide an editing prompt.")
    trimmed = (instruction or "").strip()
    if not trimmed:
        raise ValidationError("Please upload an image and provide an editing prompt.")
    return trimmed


class GenerationPipeline:
    """Runs describe-then-generate and reports every state it passes through.

    Args:
        describe: Async callable (image_bytes, mime_type, instruction) -> text.
        generate: Async callable (prompt) -> image bytes.
        timeout_seconds: Upper bound for each remote call; None waits forever.
        on_state_change: Optional observer called with each new state.
    """

    def __init__(
        self,
        describe: DescribeFn,
        generate: GenerateFn,
        timeout_seconds: Optional[float] = None,
        on_state_change: Optional[Callable[[PipelineState], None]] = None,
    ):
        self._describe = describe
        self._generate = generate
        self._timeout_seconds = timeout_seconds
        self._on_state_change = on_state_change
        self._state: PipelineState = Idle()

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.status in IN_FLIGHT_STATUSES

    def _transition(self, new_state: PipelineState) -> PipelineState:
        logger.info(f"Pipeline: {self._state.status.value} -> {new_state.status.value}")
        self._state = new_state
        if self._on_state_change:
            self._on_state_change(new_state)
        return new_state

    def reset(self) -> PipelineState:
        return self._transition(Idle())

    def fail(self, error: Exception, descriptive_prompt: Optional[str] = None) -> Failed:
        """Marks the pipeline failed, e.g. for a ReadError raised outside a run."""
        return self._transition(
            Failed(
                error_message=user_facing_message(error),
                descriptive_prompt=descriptive_prompt,
                error=error,
            )
        )

    async def _call(self, stage: str, awaitable: Awaitable):
        if self._timeout_seconds is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout_seconds)
        except asyncio.TimeoutError as e:
            raise ServiceError(
                f"Timed out after {self._timeout_seconds:g} seconds waiting for {stage}."
            ) from e

    async def describe(self, image_bytes: bytes, mime_type: str, instruction: str) -> str:
        """Stage 1 alone, bounded by the timeout. Does not touch the state."""
        return await self._call(
            "the image description", self._describe(image_bytes, mime_type, instruction)
        )

    async def generate(self, prompt: str) -> bytes:
        """Stage 2 alone, bounded by the timeout. Does not touch the state."""
        return await self._call("the generated image", self._generate(prompt))

    async def stream(
        self, image: Optional[UploadedImage], instruction: Optional[str]
    ) -> AsyncIterator[PipelineState]:
        """Runs the pipeline, yielding each state it enters.

        Raises ValidationError before the first yield, leaving the state as it
        was. Service failures end the stream on a Failed state instead of
        raising.
        """
        trimmed = validate_inputs(image, instruction)

        if not isinstance(self._state, Idle):
            yield self.reset()

        yield self._transition(AwaitingDescription())
        try:
            descriptive_prompt = await self.describe(image.raw_bytes, image.mime_type, trimmed)
        except GenerationError as e:
            logger.error(f"Descriptive prompt generation failed: {e}")
            yield self.fail(e)
            return
        except Exception as e:
            logger.error(f"Descriptive prompt generation failed: {e}")
            yield self.fail(ServiceError(str(e)))
            return

        yield self._transition(AwaitingImage(descriptive_prompt=descriptive_prompt))
        try:
            image_bytes = await self.generate(descriptive_prompt)
        except GenerationError as e:
            logger.error(f"Image generation failed: {e}")
            yield self.fail(e, descriptive_prompt=descriptive_prompt)
            return
        except Exception as e:
            logger.error(f"Image generation failed: {e}")
            yield self.fail(ServiceError(str(e)), descriptive_prompt=descriptive_prompt)
            return

        yield self._transition(
            Succeeded(
                descriptive_prompt=descriptive_prompt,
                image=GeneratedImage(image_bytes=image_bytes),
            )
        )

    async def run(
        self, image: Optional[UploadedImage], instruction: Optional[str]
    ) -> GeneratedImage:
        """Runs the pipeline to completion and returns the generated image.

        Raises the stage's error once the state has reached Failed.
        """
        async for _ in self.stream(image, instruction):
            pass

        final_state = self._state
        if isinstance(final_state, Succeeded):
            return final_state.image
        if isinstance(final_state, Failed):
            raise final_state.error or ServiceError(final_state.error_message)
        # stream() always ends in Succeeded or Failed
        raise ServiceError(f"Pipeline ended in unexpected state {final_state.status.value}")
