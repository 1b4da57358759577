import logging
import os
from typing import Dict, Mapping, Optional

import requests
from dotenv import load_dotenv
from fastapi import HTTPException
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)


class ProxySettings(BaseModel):
    upstream_base_url: str = "https://generativelanguage.googleapis.com"
    cli_upstream_base_url: str = "https://cloudcode-pa.googleapis.com"
    force_preview: bool = True
    timeout_seconds: float = Field(default=120.0, gt=0)


def load_settings() -> ProxySettings:
    values: Dict[str, object] = {}
    if os.getenv("GEMINI_UPSTREAM_BASE_URL"):
        values["upstream_base_url"] = os.environ["GEMINI_UPSTREAM_BASE_URL"].rstrip("/")
    if os.getenv("GEMINI_CLI_UPSTREAM_BASE_URL"):
        values["cli_upstream_base_url"] = os.environ["GEMINI_CLI_UPSTREAM_BASE_URL"].rstrip("/")
    force_preview = os.getenv("IMAGE_SUFFIX_FORCE_PREVIEW")
    if force_preview is not None and force_preview.strip():
        values["force_preview"] = force_preview.strip()
    if os.getenv("UPSTREAM_TIMEOUT_SECONDS"):
        values["timeout_seconds"] = os.environ["UPSTREAM_TIMEOUT_SECONDS"]
    return ProxySettings(**values)


def resolve_api_key(explicit_api_key: Optional[str] = None) -> Optional[str]:
    return (
        explicit_api_key
        or os.getenv("GOOGLE_API_KEY")
        or os.getenv("GEMINI_API_KEY")
        or os.getenv("GENAI_API_KEY")
    )


def upstream_headers(
    *,
    authorization: Optional[str] = None,
    api_key: Optional[str] = None,
) -> Dict[str, str]:
    """
    Prefer the caller's bearer token; fall back to an API key.
    """
    headers = {"Content-Type": "application/json"}
    if authorization:
        headers["Authorization"] = authorization
        return headers

    key = resolve_api_key(api_key)
    if not key:
        logger.error("Missing Gemini API key")
        raise HTTPException(status_code=500, detail="Missing Gemini API key")
    headers["x-goog-api-key"] = key
    return headers


def forward_request(
    url: str,
    body: bytes,
    *,
    headers: Mapping[str, str],
    params: Optional[Mapping[str, str]] = None,
    timeout: float = 120.0,
) -> requests.Response:
    logger.info("Forwarding request upstream", extra={"url": url, "body_bytes": len(body)})
    try:
        resp = requests.post(
            url,
            data=body,
            headers=dict(headers),
            params=dict(params or {}),
            timeout=timeout,
        )
    except requests.RequestException:
        logger.exception("Upstream request failed", extra={"url": url})
        raise HTTPException(status_code=502, detail="Upstream request failed")
    logger.info(
        "Upstream response received",
        extra={"url": url, "status_code": resp.status_code},
    )
    return resp
