"""Fixed-content endpoints: sample documents, images and the home page."""
from __future__ import annotations

import base64

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from metering import Metering

from ..deps import get_metering

router = APIRouter(tags=["formats"])

SAMPLE_JSON = {
    "slideshow": {
        "author": "Yours Truly",
        "date": "date of publication",
        "slides": [
            {"title": "Wake up to WonderWidgets!", "type": "all"},
            {
                "items": [
                    "Why <em>WonderWidgets</em> are great",
                    "Who <em>buys</em> WonderWidgets",
                ],
                "title": "Overview",
                "type": "all",
            },
        ],
        "title": "Sample Slide Show",
    }
}

SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>reflectbin HTML</title>
</head>
<body>
    <h1>Herman Melville - Moby-Dick</h1>
    <p>Call me Ishmael. Some years ago...</p>
</body>
</html>"""

SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<slideshow>
    <title>Sample Slide Show</title>
    <author>Yours Truly</author>
    <slide>
        <title>Wake up to WonderWidgets!</title>
    </slide>
</slideshow>"""

SAMPLE_SVG = """<svg width="200" height="200" xmlns="http://www.w3.org/2000/svg">
    <rect width="200" height="200" fill="#3498db"/>
    <text x="50%" y="50%" text-anchor="middle" fill="white" font-size="20">reflectbin</text>
</svg>"""

# 1x1 PNG
LOGO_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

ENDPOINTS = [
    ("/get, /post, /put, /patch, /delete", "Echo the request"),
    ("/anything", "Echo any method and body"),
    ("/headers, /ip, /user-agent", "Request details"),
    ("/status/{code}", "Respond with the given status code"),
    ("/delay/{seconds}", "Delay the response (max 10s)"),
    ("/redirect/{n}, /absolute-redirect/{n}", "Redirect chain (max 10 hops)"),
    ("/redirect-to?url=", "Redirect to a URL"),
    ("/cookies, /cookies/set, /cookies/delete", "Cookie handling"),
    ("/basic-auth/{user}/{password}, /bearer", "Authentication probes"),
    ("/json, /html, /xml, /image", "Sample documents"),
    ("/bytes/{n}", "Binary payload (max 100000 bytes)"),
    ("/stream/{n}", "Line-delimited JSON (max 100 lines)"),
    ("/uuid, /base64/{value}", "Utilities"),
    ("/metrics, /health", "Service status"),
]


def render_home() -> str:
    rows = "\n".join(
        f"        <li><code>{path}</code> {description}</li>" for path, description in ENDPOINTS
    )
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n    <title>reflectbin</title>\n</head>\n<body>\n"
        "    <h1>reflectbin</h1>\n    <p>HTTP request and response inspection service.</p>\n"
        f"    <ul>\n{rows}\n    </ul>\n</body>\n</html>"
    )


@router.get("/", response_class=HTMLResponse)
def home(metering: Metering = Depends(get_metering)):
    with metering.track("/"):
        return HTMLResponse(render_home())


@router.get("/json")
def sample_json(metering: Metering = Depends(get_metering)):
    with metering.track("/json"):
        return SAMPLE_JSON


@router.get("/html", response_class=HTMLResponse)
def sample_html(metering: Metering = Depends(get_metering)):
    with metering.track("/html"):
        return HTMLResponse(SAMPLE_HTML)


@router.get("/xml")
def sample_xml(metering: Metering = Depends(get_metering)):
    with metering.track("/xml"):
        return Response(SAMPLE_XML, media_type="application/xml")


@router.get("/image")
def image(metering: Metering = Depends(get_metering)):
    with metering.track("/image"):
        return Response(SAMPLE_SVG, media_type="image/svg+xml")


@router.get("/image/{image_format}")
def image_format(image_format: str, metering: Metering = Depends(get_metering)):
    # Every format is served as the same SVG
    with metering.track("/image"):
        return Response(SAMPLE_SVG, media_type="image/svg+xml")


@router.get("/logo.png")
def logo(metering: Metering = Depends(get_metering)):
    with metering.track("/logo.png"):
        return Response(LOGO_PNG, media_type="image/png")
