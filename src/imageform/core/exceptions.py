"""Exception types shared across the ImageForm core and HTTP layer."""


class ImageFormError(Exception):
    """Base exception for ImageForm errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(ImageFormError):
    """User-friendly validation error.

    Raised when submitted form input cannot be turned into a ``FormInput``.
    The message is intended to be displayed directly to the user, and
    ``value`` holds the offending raw input when there is a single one.
    """

    def __init__(self, message: str, value: str | None = None):
        self.value = value
        super().__init__(message)


class ConfigurationError(ImageFormError):
    """The process is misconfigured and must not serve requests."""

    pass


class UpstreamTransportError(ImageFormError):
    """The image-generation API could not be reached or returned garbage."""

    pass
