"""Turn raw form fields into a validated :class:`FormInput`."""

import logging

import pydantic

from imageform.core.exceptions import ValidationError
from imageform.core.models import MAX_IMAGES, FormInput
from imageform.core.sizes import decode

logger = logging.getLogger(__name__)


def parse_form(prompt: str, n: int | str, size: str) -> FormInput:
    """Validate submitted form values.

    Args:
        prompt: The ``prompt`` field.
        n: The ``n`` field; numeric strings are coerced.
        size: The ``size`` field, a form token such as ``"512"``.

    Returns:
        An immutable :class:`FormInput`.

    Raises:
        ValidationError: If the size token is unknown, ``n`` is not an
            integer in 1-10, or the prompt is empty.
    """
    image_size = decode(size)

    if not prompt or not prompt.strip():
        raise ValidationError("Prompt must not be empty", value=prompt)

    try:
        return FormInput(prompt=prompt, count=n, size=image_size)
    except pydantic.ValidationError as e:
        logger.debug(f"Rejected form input: {e}")
        raise ValidationError(
            f"Number of images must be a whole number between 1 and {MAX_IMAGES}",
            value=str(n),
        ) from e
