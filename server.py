import json
import logging
import os
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from image_suffix.jsonset import JSONPathError, set_bytes
from image_suffix.metadata import (
    apply_image_config_from_metadata,
    apply_image_config_from_metadata_cli,
)
from image_suffix.suffix import normalize_image_model
from utils import forward_request, load_settings, upstream_headers

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Gemini Image Suffix Proxy", version="1.0.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _relay(resp: Any) -> Response:
    return Response(
        content=resp.content,
        status_code=resp.status_code,
        media_type=resp.headers.get("content-type", "application/json"),
    )


def _query_without_key(request: Request) -> dict:
    return {k: v for k, v in request.query_params.items() if k != "key"}


def _explicit_key(request: Request) -> Optional[str]:
    return request.headers.get("x-goog-api-key") or request.query_params.get("key")


def _model_from_envelope(body: bytes) -> str:
    try:
        payload = json.loads((body or b"{}").decode("utf-8"), parse_int=str, parse_float=str)
    except (ValueError, RecursionError):
        raise HTTPException(status_code=400, detail="Request body must be JSON")
    model = payload.get("model") if isinstance(payload, dict) else None
    if not isinstance(model, str) or not model:
        raise HTTPException(status_code=400, detail="Request body must include model")
    return model


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/models/normalize")
def normalize(model: str) -> Any:
    settings = load_settings()
    base_model, metadata = normalize_image_model(model, force_preview=settings.force_preview)
    return {"model": model, "base_model": base_model, "metadata": metadata}


async def _gemini_proxy(model: str, action: str, request: Request) -> Response:
    settings = load_settings()
    body = await request.body()

    base_model, metadata = normalize_image_model(model, force_preview=settings.force_preview)
    if metadata:
        logger.info(
            "Image config applied from model suffix",
            extra={"model": model, "base_model": base_model, "image_metadata": metadata},
        )
    body = apply_image_config_from_metadata(base_model, metadata, body)

    headers = upstream_headers(
        authorization=request.headers.get("authorization"),
        api_key=_explicit_key(request),
    )
    resp = await run_in_threadpool(
        forward_request,
        f"{settings.upstream_base_url}/v1beta/models/{base_model}:{action}",
        body,
        headers=headers,
        params=_query_without_key(request),
        timeout=settings.timeout_seconds,
    )
    return _relay(resp)


@app.post("/v1beta/models/{model}:generateContent")
async def generate_content(model: str, request: Request) -> Response:
    return await _gemini_proxy(model, "generateContent", request)


@app.post("/v1beta/models/{model}:streamGenerateContent")
async def stream_generate_content(model: str, request: Request) -> Response:
    return await _gemini_proxy(model, "streamGenerateContent", request)


async def _gemini_cli_proxy(action: str, request: Request) -> Response:
    settings = load_settings()
    body = await request.body()
    model = _model_from_envelope(body)

    base_model, metadata = normalize_image_model(model, force_preview=settings.force_preview)
    if metadata:
        logger.info(
            "Image config applied from model suffix",
            extra={"model": model, "base_model": base_model, "image_metadata": metadata},
        )
        try:
            body = set_bytes(body, "model", base_model)
        except JSONPathError:
            raise HTTPException(status_code=400, detail="Request body must be JSON")
    body = apply_image_config_from_metadata_cli(base_model, metadata, body)

    headers = upstream_headers(
        authorization=request.headers.get("authorization"),
        api_key=_explicit_key(request),
    )
    resp = await run_in_threadpool(
        forward_request,
        f"{settings.cli_upstream_base_url}/v1internal:{action}",
        body,
        headers=headers,
        params=_query_without_key(request),
        timeout=settings.timeout_seconds,
    )
    return _relay(resp)


@app.post("/v1internal:generateContent")
async def cli_generate_content(request: Request) -> Response:
    return await _gemini_cli_proxy("generateContent", request)


@app.post("/v1internal:streamGenerateContent")
async def cli_stream_generate_content(request: Request) -> Response:
    return await _gemini_cli_proxy("streamGenerateContent", request)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=False,
    )
