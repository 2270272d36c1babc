"""Ruter Ingfo?"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates

from ghnotify.services.github import HANDLERS

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/", response_class=HTMLResponse)
def root(request: Request):
    """Landing page: how to point a GitHub webhook at this service."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "base_url": str(request.base_url).rstrip("/"),
            "events": sorted(HANDLERS),
            "year": datetime.now().year,
        },
    )


@router.get("/healthz", response_class=PlainTextResponse)
def healthz():
    return "ok"
