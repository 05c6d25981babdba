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

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from common.error_handling import ReadError, ServiceError, ValidationError
from config.default import Default
from models.pipeline import GenerationPipeline, PipelineStatus
from models.requests import (
    DescriptivePromptRequest,
    DescriptivePromptResponse,
    ImageEditRequest,
    ImageEditResponse,
    ImageGenerationRequest,
    ImageGenerationResponse,
)
from services.image_edit_service import (
    create_pipeline,
    describe_image,
    generate_image,
    run_image_edit,
)

router = APIRouter(prefix="/api/image_edit", tags=["image_edit"])


def get_config() -> Default:
    return Default()


def get_pipeline(config: Default = Depends(get_config)) -> GenerationPipeline:
    """A fresh pipeline per request; runs never share state."""
    return create_pipeline(config)


@router.post("/generate", response_model=ImageEditResponse)
async def generate_edited_image(
    request: ImageEditRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """
    Runs the full describe-then-generate pipeline.
    Returns the final state, with the image as a data URI on success.
    """
    try:
        response = await run_image_edit(request, pipeline)
    except (ValidationError, ReadError) as e:
        raise HTTPException(status_code=400, detail=e.message)

    if response.status == PipelineStatus.FAILED.value:
        return JSONResponse(status_code=502, content=response.model_dump())
    return response


@router.post("/describe", response_model=DescriptivePromptResponse)
async def describe(
    request: DescriptivePromptRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """Stage 1 only: image + instruction -> descriptive prompt."""
    try:
        return await describe_image(request, pipeline)
    except (ValidationError, ReadError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ServiceError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.post("/generate_image", response_model=ImageGenerationResponse)
async def generate_from_prompt(
    request: ImageGenerationRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
):
    """Stage 2 only: prompt -> base64 image bytes."""
    try:
        return await generate_image(request, pipeline)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ServiceError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/status")
async def get_status(config: Default = Depends(get_config)):
    """Reports whether an API key is configured. The key itself is never returned."""
    return {
        "api_key_status": config.api_key_status.value,
        "message": config.api_key_message,
        "description_model": config.DESCRIPTION_MODEL,
        "image_model": config.IMAGE_GEN_MODEL,
    }
