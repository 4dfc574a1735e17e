import io
import json

import pytest
import requests
from fastapi.testclient import TestClient
from requests.structures import CaseInsensitiveDict

from captioner.core.di.service_locator import ServiceLocator
from captioner.data.adapters.image_http_client import ImageHttpClient, ImageHttpConfig
from captioner.data.repositories.caption_repository_impl import CaptionRepositoryImpl
from captioner.data.repositories.image_repository_impl import ImageRepositoryImpl
from captioner.domain.usecases.describe_image_usecase import DescribeImageUseCase
from captioner.presentation.api.main import app


DELIVERY_TEMPLATE = "https://imagedelivery.net/YOVIzOVFuBiBBmJn2AVFiw/{image_id}/public"
MODEL = "@cf/llava-hf/llava-1.5-7b-hf"
PROMPT = "Generate a caption for this image"


def make_response(status_code=200, headers=None, body=b"", url="https://img.example.com/cat.png"):
    resp = requests.Response()
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.raw = io.BytesIO(body)
    resp.url = url
    resp.encoding = "utf-8"
    return resp


def make_json_response(payload, status_code=200):
    resp = requests.Response()
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
    resp._content = json.dumps(payload).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class FakeSession(requests.Session):
    """Session whose verbs answer from canned responses.

    Each canned value may be a Response, an exception to raise, or a
    zero-argument callable producing either (so replays get fresh bodies).
    """

    def __init__(self, head=None, get=None, post=None):
        super().__init__()
        self.canned = {"HEAD": head, "GET": get, "POST": post}
        self.calls = []

    def _answer(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        canned = self.canned[method]
        if callable(canned):
            canned = canned()
        if isinstance(canned, BaseException):
            raise canned
        if canned is None:
            raise AssertionError(f"unexpected {method} {url}")
        return canned

    def head(self, url, **kwargs):
        return self._answer("HEAD", url, kwargs)

    def get(self, url, **kwargs):
        return self._answer("GET", url, kwargs)

    def post(self, url, data=None, json=None, **kwargs):
        kwargs["json"] = json
        return self._answer("POST", url, kwargs)

    def methods(self):
        return [method for method, _, _ in self.calls]


class FakeInference:
    """Stands in for the Workers AI binding."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {}
        self.error = error
        self.calls = []

    def run(self, model, inputs):
        self.calls.append((model, inputs))
        if self.error is not None:
            raise self.error
        return self.result


def image_origin(body=b"\x89PNG\r\n\x1a\n\x00\x00", content_type="image/png", head_status=200, get_status=200):
    """FakeSession serving one image with matching HEAD and GET answers."""
    head_headers = {"Content-Type": content_type, "Content-Length": str(len(body))} if content_type else {}
    get_headers = {"Content-Type": content_type} if content_type else {}
    return FakeSession(
        head=lambda: make_response(head_status, head_headers),
        get=lambda: make_response(get_status, get_headers, body),
    )


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def install_service(monkeypatch):
    """Wire a use case over fake collaborators into the ServiceLocator."""

    def _install(session, inference, max_bytes=25 * 1024 * 1024):
        image_repo = ImageRepositoryImpl(client=ImageHttpClient(ImageHttpConfig(max_bytes=max_bytes), session=session))
        caption_repo = CaptionRepositoryImpl(client=inference, model=MODEL, prompt=PROMPT, max_tokens=512)
        usecase = DescribeImageUseCase(image_repo, caption_repo, DELIVERY_TEMPLATE)
        monkeypatch.setattr(ServiceLocator, "_describe_usecase", usecase)
        return usecase

    return _install
