"""ImageForm - FastAPI Application.

This module defines the application factory, the module-level ``app`` used
by uvicorn, and the ``main()`` CLI function.

Request flow for ``POST /generate``::

    parse_form -> project -> UpstreamClient.generate -> reconcile -> render

The outbound API call is the only suspension point.  Requests share nothing
mutable: the template set, the HTTP client and the credential are created
once in the lifespan and only read afterwards.

Endpoints
---------
========  ==============  ==========================================
Method    Path            Purpose
========  ==============  ==========================================
GET       ``/``           Empty form
POST      ``/generate``   Generate images and render the results page
POST      ``/openai``     Alias of ``/generate``
GET       ``/health``     Liveness probe
========  ==============  ==========================================

Usage
-----
CLI (installed entry point)::

    OPENAI_TOKEN=sk-... imageform

Direct invocation::

    python -m imageform.api.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from imageform import __version__
from imageform.api.rendering import render_home, render_state
from imageform.core.config import ImageFormConfig, config
from imageform.core.exceptions import ConfigurationError, UpstreamTransportError, ValidationError
from imageform.core.forms import parse_form
from imageform.core.models import Failure
from imageform.core.projection import project
from imageform.core.reconciler import reconcile
from imageform.core.upstream import UpstreamClient

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_MESSAGE = "The image service could not be reached. Please try again later."


def create_app(
    settings: ImageFormConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use.  Defaults to the global ``config``.
        transport: Optional httpx transport for the upstream client (tests
            pass an ``httpx.MockTransport``).

    Returns:
        A configured application.  Its lifespan raises
        :class:`ConfigurationError` when no credential is configured, so
        the server never starts accepting requests in that state.
    """
    if settings is None:
        settings = config
    templates = Jinja2Templates(directory=str(settings.templates_dir))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # --- Startup -------------------------------------------------------
        token = settings.require_token()
        http_client = httpx.AsyncClient(timeout=settings.request_timeout, transport=transport)
        app.state.token = token
        app.state.upstream = UpstreamClient(http_client, settings.api_url)
        logger.info(f"Upstream client ready for {settings.api_url}")

        yield

        # --- Shutdown ------------------------------------------------------
        await http_client.aclose()
        logger.info("Upstream client closed.")

    app = FastAPI(
        title="ImageForm",
        description="HTML front end for a hosted image-generation API.",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request) -> HTMLResponse:
        """Serve the empty form."""
        return render_home(templates, request)

    @app.post("/generate", response_class=HTMLResponse)
    @app.post("/openai", response_class=HTMLResponse, include_in_schema=False)
    async def generate(
        request: Request,
        prompt: str = Form(""),
        n: str = Form(""),
        size: str = Form(""),
    ) -> HTMLResponse:
        """Generate images for the submitted form and render the results.

        Fields arrive as raw strings so that every malformed submission is
        answered with the form page and a 400, before any outbound call.

        Returns:
            200 with the images, 502 with the error message when the image
            service reports an error or cannot be reached, or 400 when the
            submission is invalid.
        """
        try:
            form = parse_form(prompt, n, size)
        except ValidationError as e:
            logger.info(f"Rejected submission: {e.message}")
            return render_home(
                templates,
                request,
                error=e.message,
                values={"prompt": prompt, "n": n, "size_token": size},
                status_code=400,
            )

        upstream: UpstreamClient = request.app.state.upstream
        try:
            result = await upstream.generate(project(form), request.app.state.token)
        except UpstreamTransportError as e:
            logger.error(f"Image service unavailable: {e.message}")
            result = Failure(TRANSPORT_FAILURE_MESSAGE)

        state = reconcile(form, result)
        return render_state(templates, request, state)

    @app.get("/health")
    async def health() -> dict:
        """Liveness probe."""
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Validate configuration and launch the uvicorn ASGI server.

    Exits with status 1 before binding the socket when ``OPENAI_TOKEN`` is
    not set.  Registered as the ``imageform`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config.require_token()
    except ConfigurationError as e:
        logger.error(e.message)
        sys.exit(1)

    logger.info(f"Starting ImageForm {__version__} on {config.server_host}:{config.server_port}")
    uvicorn.run(
        "imageform.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
