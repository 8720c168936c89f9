"""Page rendering and HTTP outcome selection.

All pages are rendered from the single ``home.html`` template, which can
show the empty form, the form with an error message, or the form with the
generated images.  The HTTP status is chosen by :func:`status_for` after the
presentation state exists, independently of how the page is rendered.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from imageform.core.models import ErrorState, PresentationState, SuccessState
from imageform.core.sizes import accepted_tokens

HOME_TEMPLATE = "home.html"
DEFAULT_SIZE_TOKEN = "1024"

# Status for a page that carries an error reported by, or about, the
# image service.  The body is still the fully rendered form.
UPSTREAM_ERROR_STATUS = 502


def status_for(state: PresentationState) -> int:
    """Return the HTTP status for *state*.

    Args:
        state: Result of :func:`~imageform.core.reconciler.reconcile`.

    Returns:
        200 for :class:`SuccessState`, 502 for :class:`ErrorState`.

    Raises:
        TypeError: If *state* is not a presentation state.
    """
    if isinstance(state, SuccessState):
        return 200
    if isinstance(state, ErrorState):
        return UPSTREAM_ERROR_STATUS
    raise TypeError(f"Not a presentation state: {type(state).__name__}")


def _page_context(**context: Any) -> dict[str, Any]:
    page = {"sizes": accepted_tokens(), "size_token": DEFAULT_SIZE_TOKEN}
    page.update(context)
    return page


def render_state(
    templates: Jinja2Templates, request: Request, state: PresentationState
) -> HTMLResponse:
    """Render the results page for *state* with its status code."""
    return templates.TemplateResponse(
        request,
        HOME_TEMPLATE,
        _page_context(**state.to_context()),
        status_code=status_for(state),
    )


def render_home(
    templates: Jinja2Templates,
    request: Request,
    *,
    error: str | None = None,
    values: dict[str, Any] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render the form page.

    Without arguments this is the empty form.  ``error`` and ``values`` are
    used to redisplay a submission that failed validation.

    Args:
        templates: Template loader.
        request: Current request.
        error: Message shown above the form.
        values: Raw submitted values (``prompt``, ``n``, ``size_token``).
        status_code: Response status.
    """
    context = dict(values or {})
    if error is not None:
        context["error"] = error
    return templates.TemplateResponse(
        request,
        HOME_TEMPLATE,
        _page_context(**context),
        status_code=status_code,
    )
