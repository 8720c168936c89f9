"""Core request pipeline for ImageForm.

- **sizes**: form token / wire string codec for image sizes
- **forms**: validation of raw form fields into ``FormInput``
- **projection**: ``FormInput`` to ``UpstreamRequest``
- **upstream**: the one outbound call to the image-generation API
- **reconciler**: ``(FormInput, UpstreamResult)`` to ``PresentationState``
- **config**: Pydantic Settings configuration
"""

from imageform.core.config import ImageFormConfig, config
from imageform.core.exceptions import (
    ConfigurationError,
    ImageFormError,
    UpstreamTransportError,
    ValidationError,
)
from imageform.core.forms import parse_form
from imageform.core.models import (
    ErrorState,
    Failure,
    FormInput,
    PresentationState,
    ResultLine,
    Success,
    SuccessState,
    UpstreamRequest,
    UpstreamResult,
)
from imageform.core.projection import project
from imageform.core.reconciler import reconcile
from imageform.core.sizes import ImageSize, decode, encode
from imageform.core.upstream import UpstreamClient, parse_upstream_body

__all__ = [
    "ConfigurationError",
    "ErrorState",
    "Failure",
    "FormInput",
    "ImageFormConfig",
    "ImageFormError",
    "ImageSize",
    "PresentationState",
    "ResultLine",
    "Success",
    "SuccessState",
    "UpstreamClient",
    "UpstreamRequest",
    "UpstreamResult",
    "UpstreamTransportError",
    "ValidationError",
    "config",
    "decode",
    "encode",
    "parse_form",
    "parse_upstream_body",
    "project",
    "reconcile",
]
