"""
Authentication probes.

`/basic-auth/{user}/{password}` succeeds only when the Authorization header
carries exactly those credentials; `/bearer` accepts any bearer token.  Both
answer 401 with a `WWW-Authenticate` challenge otherwise.  The password path
segment is never written to the endpoint stats or the logs.
"""
from __future__ import annotations

import base64
import binascii
import hmac
import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, status

from metering import Metering

from ..deps import get_metering

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def parse_basic_credentials(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """Decode a `Basic` Authorization header into ``(user, password)``."""
    if not header or not header.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(header[6:], validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


def _matches(supplied: str, expected: str) -> bool:
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


@router.get("/basic-auth/{user}/{password}")
def basic_auth(
    user: str,
    password: str,
    request: Request,
    metering: Metering = Depends(get_metering),
):
    with metering.track(f"/basic-auth/{user}/***"):
        credentials = parse_basic_credentials(request.headers.get("authorization"))
        if credentials is not None:
            # Evaluate both comparisons so timing does not reveal which one failed
            user_ok = _matches(credentials[0], user)
            password_ok = _matches(credentials[1], password)
            if user_ok and password_ok:
                logger.info("Basic auth succeeded for %s", user)
                return {"authenticated": True, "user": user}
        logger.warning("Basic auth failed for %s", user)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": 'Basic realm="Fake Realm"'},
        )


@router.get("/bearer")
def bearer(request: Request, metering: Metering = Depends(get_metering)):
    with metering.track("/bearer"):
        header = request.headers.get("authorization", "")
        if header.startswith("Bearer "):
            return {"authenticated": True, "token": header[7:]}
        logger.warning("Bearer auth failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
