"""Expose routers to be imported in reflectbin.main."""
from . import (
    auth,
    cookies,
    dynamic,
    formats,
    health,
    echo,
    metrics,
    redirects,
)  # noqa: F401
