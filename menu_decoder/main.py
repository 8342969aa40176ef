"""Main FastAPI application."""

import asyncio
import logging
import sys
import time
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from menu_decoder.config import (
    ALLOWED_MIME_TYPES,
    ALLOWED_ORIGINS,
    LOG_LEVEL,
    MAX_UPLOAD_BYTES,
    MENU_FIELD_NAME,
)
from menu_decoder.errors import MenuAnalysisError, RequestRejectedError
from menu_decoder.image_search import PexelsImageSearch, get_image_search
from menu_decoder.schemas import Dish, ErrorResponse, MenuAnalysisResponse
from menu_decoder.services import MenuExtractor, get_menu_extractor

logging.basicConfig(
    level=LOG_LEVEL,
    stream=sys.stdout,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# -----------------------------------
# App initialization
# -----------------------------------

app = FastAPI(title="Menu Decoder")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# -----------------------------------
# Error rendering: always {"error": "..."}
# -----------------------------------


@app.exception_handler(MenuAnalysisError)
async def menu_analysis_error_handler(request: Request, exc: MenuAnalysisError):
    if exc.status_code >= 500:
        logger.error("Request to %s failed: %s", request.url.path, exc)
    else:
        logger.warning("Rejected request to %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error in %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": MenuAnalysisError.message})


# -----------------------------------
# Dependencies
# -----------------------------------


def get_allowed_origins() -> List[str]:
    return ALLOWED_ORIGINS


def verify_origin(request: Request, allowed_origins: List[str] = Depends(get_allowed_origins)):
    origin = request.headers.get("origin")
    if not origin or origin.rstrip("/") not in allowed_origins:
        raise RequestRejectedError(
            f"Origin {origin!r} is not in the allow-list",
            message="Origin not allowed",
            status_code=403,
        )


def _validate_upload_headers(menu: Optional[UploadFile]) -> str:
    """Presence, MIME type and declared size. Returns the normalized MIME type."""
    if menu is None:
        raise RequestRejectedError(
            f"No file in form field {MENU_FIELD_NAME!r}", message="No menu image provided"
        )
    if menu.size == 0:
        raise RequestRejectedError("Uploaded file is empty", message="No menu image provided")

    content_type = (menu.content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_MIME_TYPES:
        raise RequestRejectedError(
            f"Unsupported content type {menu.content_type!r}",
            message="Unsupported image type (use jpeg, png or webp)",
            status_code=415,
        )

    if menu.size is not None and menu.size >= MAX_UPLOAD_BYTES:
        raise RequestRejectedError(
            f"Declared size {menu.size} bytes exceeds limit",
            message="Image is too large (max 6 MB)",
            status_code=413,
        )

    return content_type


async def _enrich(dish: Dish, image_search: PexelsImageSearch) -> List[str]:
    try:
        return await asyncio.to_thread(image_search.search, dish.name)
    except Exception:
        logger.exception("[PIPELINE] Image search failed for %r", dish.name)
        return []


# -----------------------------------
# Endpoints
# -----------------------------------


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post(
    "/api/analyze-menu",
    response_model=MenuAnalysisResponse,
    responses={
        code: {"model": ErrorResponse}
        for code in (400, 403, 413, 415, 500, 502)
    },
    dependencies=[Depends(verify_origin)],
)
async def analyze_menu(
    menu: Optional[UploadFile] = File(None, alias=MENU_FIELD_NAME),
    extractor: MenuExtractor = Depends(get_menu_extractor),
    image_search: PexelsImageSearch = Depends(get_image_search),
):
    """Menu photo → Gemini extraction → per-dish Pexels photos."""
    content_type = _validate_upload_headers(menu)

    content = await menu.read(MAX_UPLOAD_BYTES)
    if not content:
        raise RequestRejectedError("Uploaded file is empty", message="No menu image provided")
    if len(content) >= MAX_UPLOAD_BYTES:
        raise RequestRejectedError(
            "Uploaded file reached the size limit",
            message="Image is too large (max 6 MB)",
            status_code=413,
        )

    total_start = time.time()
    logger.info(
        "[PIPELINE] Starting /api/analyze-menu for file: %s (%s, %s bytes)",
        menu.filename,
        content_type,
        len(content),
    )

    try:
        # STEP 1 — EXTRACTION
        extract_start = time.time()
        dishes = await asyncio.to_thread(extractor.extract, content, content_type)
        extract_time = time.time() - extract_start
        logger.info(
            "[PIPELINE] Step 1: Extraction completed in %sms, found %s dishes",
            round(extract_time * 1000, 2),
            len(dishes),
        )

        # STEP 2 — ENRICHMENT (one search per dish, all at once)
        enrich_start = time.time()
        image_lists = await asyncio.gather(*(_enrich(dish, image_search) for dish in dishes))
        for dish, images in zip(dishes, image_lists):
            dish.images = images
        enrich_time = time.time() - enrich_start
        logger.info(
            "[PIPELINE] Step 2: Enrichment completed in %sms, %s/%s dishes with images",
            round(enrich_time * 1000, 2),
            sum(1 for images in image_lists if images),
            len(dishes),
        )
    except MenuAnalysisError:
        raise
    except Exception as e:
        logger.exception("Error in /api/analyze-menu")
        raise MenuAnalysisError(f"Unexpected error: {e}") from e

    logger.info(
        "[PIPELINE] /api/analyze-menu completed successfully, total time: %sms",
        round((time.time() - total_start) * 1000, 2),
    )
    return MenuAnalysisResponse(dishes=dishes)
