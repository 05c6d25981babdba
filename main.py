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

"""Serves the Mesop UI and the JSON API from one FastAPI app."""

import logging
import os

import mesop as me
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.wsgi import WSGIMiddleware

from common.analytics import get_logger
from common.error_handling import UnknownHandlerIdFilter
from config.default import ApiKeyStatus, Default
from routers import image_edit_router

# Registers the Mesop page routes
import pages.image_editor  # noqa: F401  pylint: disable=unused-import

logger = get_logger(__name__)

for handler in logging.getLogger().handlers:
    handler.addFilter(UnknownHandlerIdFilter())
logging.getLogger("mesop").addFilter(UnknownHandlerIdFilter())

cfg = Default()

if cfg.api_key_status != ApiKeyStatus.CONFIGURED:
    # Non-blocking: runs are still attempted and fail at the service.
    logger.warning(cfg.api_key_message)
else:
    logger.info(
        f"Gemini API key detected. Description model: {cfg.DESCRIPTION_MODEL}, "
        f"image model: {cfg.IMAGE_GEN_MODEL}"
    )

app = FastAPI(title=cfg.APP_TITLE)
app.include_router(image_edit_router.router)


@app.get("/health")
def health():
    return {"status": "ok"}


app.mount(
    "/",
    WSGIMiddleware(
        me.create_wsgi_app(debug_mode=os.environ.get("DEBUG_MODE", "") == "true")
    ),
)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "8080")),
        reload=True,
    )
