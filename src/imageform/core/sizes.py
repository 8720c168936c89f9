"""Image size codec.

Two independent vocabularies describe the same closed set of sizes:

- the HTML form submits short tokens (``"256"``, ``"512"``, ``"1024"``)
- the image-generation API expects ``"WxH"`` strings (``"256x256"``, ...)

:func:`decode` accepts only the form vocabulary and :func:`encode` only
produces the API vocabulary.  The two string spaces never overlap, so a
wire string submitted through the form is rejected like any other unknown
token.
"""

from enum import Enum

from imageform.core.exceptions import ValidationError


class ImageSize(Enum):
    """Square output sizes supported by the image-generation API."""

    S256x256 = "256x256"
    S512x512 = "512x512"
    S1024x1024 = "1024x1024"


_FORM_TOKENS: dict[str, ImageSize] = {
    "256": ImageSize.S256x256,
    "512": ImageSize.S512x512,
    "1024": ImageSize.S1024x1024,
}

_TOKENS_BY_SIZE: dict[ImageSize, str] = {size: token for token, size in _FORM_TOKENS.items()}


def decode(token: str) -> ImageSize:
    """Decode a form token into an :class:`ImageSize`.

    Matching is exact: no trimming, no case folding, no partial matches.

    Args:
        token: Raw ``size`` value from the submitted form.

    Returns:
        The matching size.

    Raises:
        ValidationError: If the token is not one of the accepted tokens.
            The raw token is available as ``error.value``.
    """
    try:
        return _FORM_TOKENS[token]
    except (KeyError, TypeError):
        accepted = ", ".join(_FORM_TOKENS)
        raise ValidationError(
            f"Unsupported size {token!r}; expected one of {accepted}",
            value=token,
        ) from None


def encode(size: ImageSize) -> str:
    """Return the API wire string for *size* (e.g. ``"512x512"``)."""
    return size.value


def form_token(size: ImageSize) -> str:
    """Return the form token for *size*, used to re-select it in the page."""
    return _TOKENS_BY_SIZE[size]


def accepted_tokens() -> list[str]:
    """Form tokens in ascending size order, for rendering the size picker."""
    return list(_FORM_TOKENS)
