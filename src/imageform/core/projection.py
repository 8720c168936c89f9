"""Projection of validated form input onto the API request body."""

from imageform.core.models import FormInput, UpstreamRequest


def project(form: FormInput) -> UpstreamRequest:
    """Build the outbound request for *form*.

    No validation happens here; ``form`` is already valid.  The size is
    carried as an :class:`~imageform.core.sizes.ImageSize` and rendered to
    its wire string when the request is serialised.
    """
    return UpstreamRequest(prompt=form.prompt, count=form.count, size=form.size)
