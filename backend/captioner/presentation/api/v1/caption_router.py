import json
from typing import Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field, ValidationError

from captioner.core.di.service_locator import ServiceLocator
from captioner.core.utils.logger import get_logger
from captioner.domain.errors import CaptionServiceError


_logger = get_logger("caption_router")

router = APIRouter(tags=["caption"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class UrlBody(BaseModel):
    url: Optional[str] = Field(None, description="Image URL to caption")


class CaptionText(BaseModel):
    text: str


class ErrorBody(BaseModel):
    code: int
    message: str


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorBody(code=status_code, message=message)
    return JSONResponse(body.model_dump(), status_code=status_code, headers=CORS_HEADERS)


async def url_from_body(request: Request) -> Optional[str]:
    """Read ``url`` from a JSON or form-encoded POST body.

    Bodies that cannot be decoded count as empty.
    """
    content_type = request.headers.get("content-type", "").lower()
    raw = await request.body()
    if "application/json" in content_type:
        try:
            payload = json.loads(raw or b"null")
            return UrlBody.model_validate(payload).url or None
        except (ValueError, ValidationError):
            return None
    if "application/x-www-form-urlencoded" in content_type:
        try:
            fields = parse_qs(raw.decode("utf-8"), keep_blank_values=True)
        except UnicodeDecodeError:
            return None
        values = fields.get("url") or [""]
        return values[0] or None
    return None


@router.api_route(
    "/",
    methods=["GET", "POST"],
    summary="Caption an image",
    responses={
        200: {"description": "Caption as text/plain (v=1) or JSON (v=2)", "model": CaptionText},
        400: {"model": ErrorBody},
        413: {"model": ErrorBody},
        415: {"model": ErrorBody},
        500: {"model": ErrorBody},
    },
)
async def caption_image(
    request: Request,
    url: Optional[str] = Query(None, description="Direct http(s) image URL"),
    image_id: Optional[str] = Query(None, description="Legacy image-delivery identifier"),
    v: Optional[str] = Query(None, description="Response version: 1 (text) or 2 (JSON)"),
) -> Response:
    version = v or "1"
    try:
        image_url = url or None
        if image_url is None and request.method == "POST":
            image_url = await url_from_body(request)

        _logger.info("Caption request url=%s image_id=%s v=%s", image_url, image_id, version)
        usecase = ServiceLocator.describe_usecase()
        result = await run_in_threadpool(usecase.execute, url=image_url, image_id=image_id or None)
    except CaptionServiceError as e:
        _logger.warning("Caption request rejected (%s): %s", e.status_code, e.message)
        return error_response(e.status_code, e.message)
    except Exception as e:
        _logger.exception("Caption request failed")
        return error_response(500, str(e))

    if version == "2":
        return JSONResponse(CaptionText(text=result.text).model_dump(), headers=CORS_HEADERS)
    return PlainTextResponse(result.text, headers=CORS_HEADERS)


@router.options("/", include_in_schema=False)
def caption_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)
