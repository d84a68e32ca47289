"""Cookie inspection and manipulation endpoints."""
from __future__ import annotations

import logging
from http.cookies import CookieError
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from metering import Metering

from ..deps import get_metering

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cookies", tags=["cookies"])


def invalid_cookie_name(name: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid cookie name", "name": name},
    )


@router.get("")
def cookies(request: Request, metering: Metering = Depends(get_metering)):
    """Return the cookies sent with the request."""
    with metering.track("/cookies"):
        return {"cookies": dict(request.cookies)}


@router.get("/set")
def set_cookies(request: Request, metering: Metering = Depends(get_metering)):
    """Set one cookie per query argument, e.g. `/cookies/set?k1=v1&k2=v2`.

    Query keys become cookie names, so a key that is not a legal cookie
    token is answered with a 400 and nothing is set.
    """
    with metering.track("/cookies/set") as outcome:
        values = dict(request.query_params)
        response = JSONResponse({"cookies": values})
        for name, value in values.items():
            try:
                response.set_cookie(name, value)
            except CookieError:
                logger.info("Refusing to set cookie with illegal name %r", name)
                outcome.fail()
                return invalid_cookie_name(name)
        return response


@router.get("/delete")
def delete_cookie(
    name: Optional[str] = Query(default=None),
    metering: Metering = Depends(get_metering),
):
    with metering.track("/cookies/delete") as outcome:
        response = JSONResponse({"message": "Cookie deleted"})
        if name:
            try:
                response.delete_cookie(name)
            except CookieError:
                outcome.fail()
                return invalid_cookie_name(name)
        return response
