"""Configuration management for ImageForm.

Configuration is loaded with Pydantic Settings from environment variables
carrying the ``IMAGEFORM_`` prefix, falling back to a ``.env`` file in the
working directory and then to the defaults defined below.

The one required value is the bearer credential for the image-generation
API.  It is read from ``OPENAI_TOKEN`` (``IMAGEFORM_OPENAI_TOKEN`` is also
accepted).  Its absence is a startup failure: :meth:`ImageFormConfig.require_token`
is called by the application lifespan and by the ``imageform`` console
script before the server binds its socket, so a misconfigured process never
handles a request.

Example .env file:
    OPENAI_TOKEN=sk-...
    IMAGEFORM_SERVER_PORT=3000
    IMAGEFORM_REQUEST_TIMEOUT=60
    IMAGEFORM_LOG_LEVEL=DEBUG

Usage Example
-------------
    from imageform.core.config import config

    token = config.require_token()
    print(config.api_url)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from imageform.core.exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.openai.com/v1/images/generations"

# Templates ship inside the package: src/imageform/templates/
PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class ImageFormConfig(BaseSettings):
    """Main configuration for ImageForm.

    Attributes
    ----------
    Upstream API:
        openai_token : str | None
            Bearer credential for the image-generation API
        api_url : str
            Image-generation endpoint that receives ``{prompt, n, size}``
        request_timeout : float
            Seconds to wait for the upstream API before giving up

    Server:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Bind port (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root logging level used by the console script

    Paths:
        templates_dir : Path
            Directory holding ``home.html``
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMAGEFORM_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    openai_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_TOKEN", "IMAGEFORM_OPENAI_TOKEN"),
        description="Bearer credential for the image-generation API",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Image-generation endpoint",
    )
    request_timeout: float = Field(
        default=60.0,
        description="Upstream request timeout in seconds",
        gt=0,
    )

    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the console script",
    )

    templates_dir: Path = Field(
        default=PACKAGE_TEMPLATES_DIR,
        description="Directory containing the Jinja2 page templates",
    )

    def require_token(self) -> str:
        """Return the upstream credential, refusing to continue without one.

        Returns:
            The non-empty bearer token.

        Raises:
            ConfigurationError: If no token is configured.
        """
        token = (self.openai_token or "").strip()
        if not token:
            raise ConfigurationError(
                "No OpenAI token defined. Remember to set the OPENAI_TOKEN environment variable"
            )
        return token


# Global configuration instance, loaded once at import time.
config = ImageFormConfig()
