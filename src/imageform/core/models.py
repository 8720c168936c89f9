"""Data models for one pass through the generate pipeline.

Every object here is created fresh for a single request and is immutable
once built.  The flow is::

    FormInput --project--> UpstreamRequest --generate--> UpstreamResult
    (FormInput, UpstreamResult) --reconcile--> PresentationState

``UpstreamResult`` and ``PresentationState`` are closed tagged unions: each
value is exactly one of two frozen dataclasses, so consumers branch with
``isinstance`` rather than by probing optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from imageform.core.sizes import ImageSize, encode, form_token

MAX_IMAGES = 10


class FormInput(BaseModel):
    """Validated form submission.

    Built by :func:`imageform.core.forms.parse_form`; ``size`` has already
    been decoded from its form token.

    Attributes:
        prompt: Text description of the desired image.
        count: Number of images to request (1-10).
        size: Requested output size.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Text prompt for the image.")
    count: int = Field(..., ge=1, le=MAX_IMAGES, description="Number of images (1-10).")
    size: ImageSize = Field(..., description="Requested output size.")


class UpstreamRequest(BaseModel):
    """Outbound body for the image-generation API.

    Mirrors :class:`FormInput` field for field today but is a separate type,
    so fields added to the API body never leak into form handling.  The
    JSON form (``model_dump(mode="json")``) uses the API's field names and
    wire size strings: ``{"prompt": ..., "n": ..., "size": "512x512"}``.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str
    count: int = Field(..., serialization_alias="n")
    size: ImageSize

    @field_serializer("size")
    def _serialize_size(self, size: ImageSize) -> str:
        return encode(size)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to the API."""
        return self.model_dump(mode="json", by_alias=True)


class ResultLine(BaseModel):
    """One generated image, as returned by the API."""

    model_config = ConfigDict(frozen=True)

    url: str


# ---------------------------------------------------------------------------
# Upstream outcome.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    """The API returned a ``data`` array."""

    lines: tuple[ResultLine, ...]


@dataclass(frozen=True)
class Failure:
    """The API returned an ``error`` object, or no usable answer at all."""

    message: str


UpstreamResult = Success | Failure


# ---------------------------------------------------------------------------
# Presentation state.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _EchoedInput:
    prompt: str
    count: int
    size: ImageSize

    def _base_context(self) -> dict[str, Any]:
        return {
            "prompt": self.prompt,
            "n": self.count,
            "size": encode(self.size),
            "size_token": form_token(self.size),
        }


@dataclass(frozen=True)
class SuccessState(_EchoedInput):
    """The submitted values plus the images the API produced."""

    data: tuple[ResultLine, ...]

    def to_context(self) -> dict[str, Any]:
        """Template context for ``home.html``."""
        context = self._base_context()
        context["data"] = [{"url": line.url} for line in self.data]
        return context


@dataclass(frozen=True)
class ErrorState(_EchoedInput):
    """The submitted values plus the reason no images were produced."""

    error: str

    def to_context(self) -> dict[str, Any]:
        """Template context for ``home.html``."""
        context = self._base_context()
        context["error"] = self.error
        return context


PresentationState = SuccessState | ErrorState
