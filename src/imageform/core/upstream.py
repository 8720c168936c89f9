"""Client for the hosted image-generation API.

:class:`UpstreamClient` performs exactly one ``POST`` per call (no retries,
no caching) and maps the JSON answer onto :data:`UpstreamResult`.

The API answers with one of two body shapes::

    {"data": [{"url": "https://..."}, ...]}
    {"error": {"message": "..."}}

The body decides the outcome, not the HTTP status: an ``error`` object on
a 4xx response is an ordinary :class:`Failure`.  When both keys are present
the error wins.  A body with neither is a :class:`Failure` carrying a
synthesized diagnostic.

Anything that prevents reading a JSON object at all (connection failure,
timeout, non-JSON body) raises :class:`UpstreamTransportError`; deciding
how to present that is left to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from imageform.core.exceptions import ConfigurationError, UpstreamTransportError
from imageform.core.models import Failure, ResultLine, Success, UpstreamRequest, UpstreamResult
from imageform.core.sizes import encode

logger = logging.getLogger(__name__)

MALFORMED_RESPONSE_MESSAGE = "The image service returned a response without images or an error."


class UpstreamErrorBody(BaseModel):
    """The ``error`` object of a failed API call."""

    message: str


# Validator for the ``data`` array of a successful call.
_RESULT_LINES = TypeAdapter(list[ResultLine])


def parse_upstream_body(body: Any) -> UpstreamResult:
    """Map a decoded JSON body onto :data:`UpstreamResult`.

    ``error`` and ``data`` are validated independently, so a usable
    ``error`` object is reported even when ``data`` is malformed.

    Args:
        body: Decoded JSON from the API.

    Returns:
        :class:`Failure` with the API's message when a valid ``error`` object
        is present, :class:`Success` when a valid ``data`` list is present,
        and :class:`Failure` with a synthesized message otherwise.

    Raises:
        UpstreamTransportError: If *body* is not a JSON object.
    """
    if not isinstance(body, dict):
        raise UpstreamTransportError(
            f"Expected a JSON object from the image service, got {type(body).__name__}"
        )

    if body.get("error") is not None:
        try:
            return Failure(UpstreamErrorBody.model_validate(body["error"]).message)
        except PydanticValidationError as e:
            logger.warning(f"Unrecognised error object from image service: {e}")

    if body.get("data") is not None:
        try:
            return Success(tuple(_RESULT_LINES.validate_python(body["data"])))
        except PydanticValidationError as e:
            logger.warning(f"Unrecognised data array from image service: {e}")

    return Failure(MALFORMED_RESPONSE_MESSAGE)


class UpstreamClient:
    """Thin adapter over a shared :class:`httpx.AsyncClient`.

    The HTTP client is owned by the caller (the application lifespan), so
    connection pooling and timeouts are configured in one place.

    Args:
        http_client: Client used for the outbound call.
        api_url: Image-generation endpoint.
    """

    def __init__(self, http_client: httpx.AsyncClient, api_url: str):
        self.http_client = http_client
        self.api_url = api_url

    async def generate(self, request: UpstreamRequest, credential: str) -> UpstreamResult:
        """Ask the API for images.

        Args:
            request: Outbound request body.
            credential: Bearer token for the API.

        Returns:
            :class:`Success` or :class:`Failure`.

        Raises:
            ConfigurationError: If *credential* is empty.
            UpstreamTransportError: On connection failure, timeout, or a body
                that is not a JSON object.
        """
        if not credential:
            raise ConfigurationError("No credential available for the image service")

        logger.info(f"Requesting {request.count} image(s) at {encode(request.size)}")

        try:
            response = await self.http_client.post(
                self.api_url,
                headers={"Authorization": f"Bearer {credential}"},
                json=request.to_payload(),
            )
        except httpx.TimeoutException as e:
            raise UpstreamTransportError("The image service did not respond in time") from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"Could not reach the image service: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamTransportError(
                f"The image service returned an unreadable response ({response.status_code})"
            ) from e

        result = parse_upstream_body(body)
        if isinstance(result, Failure):
            logger.warning(
                f"Image service reported an error (status {response.status_code}): {result.message}"
            )
        else:
            logger.info(f"Image service returned {len(result.lines)} image(s)")
        return result
