"""
Redirect endpoints.

`/redirect/{n}` and `/absolute-redirect/{n}` answer with a single hop towards
`n - 1` and end at `/get`.  The service never follows the chain itself: each
hop is a new request that passes through the depth guardrail again.
`/redirect-to` sends the caller to a user-supplied URL once its scheme and
length have been vetted.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from metering import Metering
from metering.policies import (
    REDIRECT_BASE_PATH,
    check_redirect_depth,
    check_redirect_target,
    endpoint_key,
    next_redirect_hop,
    normalize_redirect_target,
)

from ..deps import get_metering, public_base_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirects"])


def _hop(n: int, prefix: str, base: str) -> RedirectResponse:
    hop = next_redirect_hop(n)
    location = f"{base}{REDIRECT_BASE_PATH}" if hop is None else f"{base}{prefix}/{hop}"
    return RedirectResponse(location, status_code=302)


@router.get("/redirect/{n}")
def redirect(n: int = Path(..., ge=0), metering: Metering = Depends(get_metering)):
    """Relative redirect chain of depth ``n``."""
    verdict = check_redirect_depth(n)
    with metering.track(endpoint_key("/redirect/{n}", n, verdict)) as outcome:
        if verdict.rejected:
            outcome.reject(verdict)
            return JSONResponse(status_code=400, content=verdict.to_body())
        return _hop(n, "/redirect", "")


@router.get("/absolute-redirect/{n}")
def absolute_redirect(
    request: Request,
    n: int = Path(..., ge=0),
    metering: Metering = Depends(get_metering),
):
    """Like `/redirect/{n}` but every Location is an absolute URL."""
    verdict = check_redirect_depth(n)
    with metering.track(endpoint_key("/absolute-redirect/{n}", n, verdict)) as outcome:
        if verdict.rejected:
            outcome.reject(verdict)
            return JSONResponse(status_code=400, content=verdict.to_body())
        return _hop(n, "/absolute-redirect", public_base_url(request))


@router.get("/redirect-to")
def redirect_to(url: str = Query(...), metering: Metering = Depends(get_metering)):
    with metering.track("/redirect-to") as outcome:
        verdict = check_redirect_target(url)
        if verdict.rejected:
            outcome.reject(verdict)
            return JSONResponse(status_code=400, content=verdict.to_body())
        target = normalize_redirect_target(url)
        logger.info("Redirecting to %s", target)
        return RedirectResponse(target, status_code=302)
