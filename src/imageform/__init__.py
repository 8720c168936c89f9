"""ImageForm - a minimal web front end for a hosted image-generation API."""

__version__ = "0.1.0"

from imageform.core.config import ImageFormConfig

__all__ = [
    "ImageFormConfig",
    "__version__",
]
