"""
Synthetic endpoints: arbitrary status codes, delays, random-ish payloads.

`/delay`, `/bytes` and `/stream` are driven by a caller-chosen size, so each
runs its guardrail before doing any work.  A rejected request is answered
with a 400 body describing the limit and never sleeps or allocates.

Allowed sizes are recorded under their concrete key (`/bytes/512`); every
rejected size shares the route template (`/bytes/{n}`).  That keeps the
endpoint table bounded at the cost of not telling rejected sizes apart.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import uuid

from fastapi import APIRouter, Depends, Path, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from metering import Metering
from metering.policies import check_byte_count, check_delay, check_stream_lines, endpoint_key

from ..deps import get_metering

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dynamic"])

_STATUS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def cyclic_bytes(n: int) -> bytes:
    """``n`` bytes whose values run 0..255 and wrap around."""
    full, rest = divmod(n, 256)
    return bytes(range(256)) * full + bytes(range(rest))


@router.api_route("/status/{code}", methods=_STATUS_METHODS)
def status_code(code: int = Path(..., ge=0, le=65535), metering: Metering = Depends(get_metering)):
    """Respond with ``code``; codes outside 100-999 fall back to 200."""
    with metering.track(f"/status/{code}") as outcome:
        status = code if 100 <= code <= 999 else 200
        if 200 <= status < 300:
            outcome.succeed()
        else:
            outcome.fail()
        return Response(status_code=status)


@router.get("/delay/{seconds}")
async def delay(seconds: int = Path(..., ge=0), metering: Metering = Depends(get_metering)):
    verdict = check_delay(seconds)
    with metering.track(endpoint_key("/delay/{seconds}", seconds, verdict)) as outcome:
        if verdict.rejected:
            outcome.reject(verdict)
            return JSONResponse(status_code=400, content=verdict.to_body())
        logger.info("Delaying response for %s seconds", seconds)
        # Suspends only this task; cancellation leaves the outcome unsettled
        await asyncio.sleep(seconds)
        return {"delay": seconds, "message": f"Delayed for {seconds} seconds"}


@router.get("/bytes/{n}")
def byte_payload(n: int = Path(..., ge=0), metering: Metering = Depends(get_metering)):
    verdict = check_byte_count(n)
    with metering.track(endpoint_key("/bytes/{n}", n, verdict)) as outcome:
        if verdict.rejected:
            outcome.reject(verdict)
            return JSONResponse(status_code=400, content=verdict.to_body())
        return Response(content=cyclic_bytes(n), media_type="application/octet-stream")


@router.get("/stream/{n}")
def stream(request: Request, n: int = Path(..., ge=0), metering: Metering = Depends(get_metering)):
    """``n`` newline-delimited JSON objects."""
    verdict = check_stream_lines(n)
    with metering.track(endpoint_key("/stream/{n}", n, verdict)) as outcome:
        if verdict.rejected:
            outcome.reject(verdict)
            return JSONResponse(status_code=400, content=verdict.to_body())
        url = str(request.url)
        args = dict(request.query_params)
        lines = [json.dumps({"id": i, "url": url, "args": args}) for i in range(n)]
        return Response(content="\n".join(lines), media_type="application/json")


@router.get("/uuid")
def uuid4(metering: Metering = Depends(get_metering)):
    with metering.track("/uuid"):
        return {"uuid": str(uuid.uuid4())}


@router.get("/base64/{value}")
def decode_base64(value: str, metering: Metering = Depends(get_metering)):
    # The encoded value may carry user data, so it stays out of the endpoint key
    with metering.track("/base64/decode") as outcome:
        try:
            decoded = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            outcome.fail()
            return PlainTextResponse("Invalid base64", status_code=400)
        try:
            text = decoded.decode("utf-8")
        except UnicodeDecodeError:
            outcome.fail()
            return PlainTextResponse("Invalid UTF-8", status_code=400)
        return PlainTextResponse(text)
