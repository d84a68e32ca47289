"""
Request reflection endpoints.

`/get`, `/post`, `/put`, `/patch`, `/delete` and `/anything` echo back the
query args, headers, origin and URL of the call; body-carrying methods also
get the raw body as `data`, the parsed body as `json` when it is valid JSON,
and `form` for url-encoded submissions.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request

from metering import Metering

from ..deps import client_origin, get_metering
from ..schemas import RequestInfo

router = APIRouter(tags=["echo"])

_EXCLUDE_NONE = {"response_model_exclude_none": True}
_ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _headers(request: Request) -> Dict[str, str]:
    return {key: value for key, value in request.headers.items()}


def _parse_json(raw: str) -> Optional[Any]:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def _parse_form(request: Request, raw: str) -> Optional[Dict[str, str]]:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/x-www-form-urlencoded"):
        return None
    return dict(parse_qsl(raw, keep_blank_values=True))


async def reflect(request: Request, with_body: bool, include_method: bool = False) -> RequestInfo:
    info: Dict[str, Any] = {
        "args": dict(request.query_params),
        "headers": _headers(request),
        "origin": client_origin(request),
        "url": str(request.url),
    }
    if include_method:
        info["method"] = request.method
    if with_body:
        raw = (await request.body()).decode("utf-8", errors="replace")
        info["data"] = raw
        info["json"] = _parse_json(raw)
        info["form"] = _parse_form(request, raw)
    return RequestInfo(**info)


@router.get("/get", response_model=RequestInfo, **_EXCLUDE_NONE)
async def get_method(request: Request, metering: Metering = Depends(get_metering)):
    """Echo query args and headers."""
    with metering.track("/get"):
        return await reflect(request, with_body=False)


@router.post("/post", response_model=RequestInfo, **_EXCLUDE_NONE)
async def post_method(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/post"):
        return await reflect(request, with_body=True)


@router.put("/put", response_model=RequestInfo, **_EXCLUDE_NONE)
async def put_method(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/put"):
        return await reflect(request, with_body=True)


@router.patch("/patch", response_model=RequestInfo, **_EXCLUDE_NONE)
async def patch_method(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/patch"):
        return await reflect(request, with_body=True)


@router.delete("/delete", response_model=RequestInfo, **_EXCLUDE_NONE)
async def delete_method(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/delete"):
        return await reflect(request, with_body=False)


@router.api_route("/anything", methods=_ANY_METHOD, response_model=RequestInfo, **_EXCLUDE_NONE)
@router.api_route(
    "/anything/{path:path}", methods=_ANY_METHOD, response_model=RequestInfo, **_EXCLUDE_NONE
)
async def anything(request: Request, metering: Metering = Depends(get_metering)):
    """Echo any request, including its method and body."""
    with metering.track("/anything"):
        return await reflect(request, with_body=True, include_method=True)


@router.get("/headers")
def headers(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/headers"):
        return {"headers": _headers(request)}


@router.get("/ip")
def ip(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/ip"):
        return {"origin": client_origin(request)}


@router.get("/user-agent")
def user_agent(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/user-agent"):
        return {"user-agent": request.headers.get("user-agent", "Unknown")}
