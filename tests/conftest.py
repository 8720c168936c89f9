"""Shared pytest fixtures for ImageForm tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from imageform.api.main import create_app
from imageform.core.config import ImageFormConfig
from imageform.core.models import FormInput
from imageform.core.sizes import ImageSize

TEST_TOKEN = "sk-test-token"
TEST_API_URL = "https://images.example.test/v1/images/generations"


class FakeImageService:
    """Stand-in for the image-generation API behind an httpx.MockTransport.

    Every request is recorded.  ``respond`` replaces the handler used for
    subsequent requests; by default one URL per requested image is returned.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._handler: Callable[[httpx.Request], httpx.Response] = self._default

    @staticmethod
    def _default(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        urls = [{"url": f"https://cdn.example.test/img-{i}.png"} for i in range(body["n"])]
        return httpx.Response(200, json={"created": 1, "data": urls})

    def respond(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def test_config(monkeypatch) -> ImageFormConfig:
    """Configuration with a credential and a fake API URL.

    Returns:
        ImageFormConfig isolated from the developer's environment
    """
    monkeypatch.delenv("OPENAI_TOKEN", raising=False)
    monkeypatch.delenv("IMAGEFORM_OPENAI_TOKEN", raising=False)
    return ImageFormConfig(
        _env_file=None,
        openai_token=TEST_TOKEN,
        api_url=TEST_API_URL,
        request_timeout=5.0,
    )


@pytest.fixture
def tokenless_config(monkeypatch) -> ImageFormConfig:
    """Configuration with no credential at all."""
    monkeypatch.delenv("OPENAI_TOKEN", raising=False)
    monkeypatch.delenv("IMAGEFORM_OPENAI_TOKEN", raising=False)
    return ImageFormConfig(_env_file=None, api_url=TEST_API_URL)


@pytest.fixture
def image_service() -> FakeImageService:
    """Fake upstream API recording every request."""
    return FakeImageService()


@pytest.fixture
def test_app(test_config: ImageFormConfig, image_service: FakeImageService):
    """Application wired to the fake upstream API."""
    return create_app(test_config, transport=image_service.transport)


@pytest.fixture
def test_client(test_app) -> Generator[TestClient, None, None]:
    """TestClient with the application lifespan running."""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def cat_form() -> FormInput:
    """The form submission used throughout the reconciler tests."""
    return FormInput(prompt="cat", count=2, size=ImageSize.S512x512)
