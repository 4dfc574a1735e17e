import logging
from dataclasses import dataclass
from typing import Optional

import requests
from urllib3.exceptions import LocationParseError

from captioner.domain.errors import (
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    UpstreamFetchError,
)


logger = logging.getLogger(__name__)


@dataclass
class ImageHttpConfig:
    max_bytes: int = 25 * 1024 * 1024
    timeout: float = 30.0
    chunk_size: int = 64 * 1024
    user_agent: str = "image-captioner/1.0"


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _parse_length(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class ImageHttpClient:
    """Downloads images from arbitrary http(s) origins.

    A HEAD probe runs first so oversized images can be rejected before any
    body is transferred. Origins that fail or refuse HEAD are tolerated and
    the GET response is checked instead. The body is streamed and reading
    stops as soon as it grows past ``max_bytes``.
    """

    def __init__(self, config: ImageHttpConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", config.user_agent)

    def probe(self, image_url: str) -> Optional[dict]:
        try:
            resp = self._session.head(image_url, allow_redirects=True, timeout=self.config.timeout)
        except (requests.RequestException, LocationParseError) as e:
            logger.warning("HEAD probe failed for %s, falling back to GET: %s", image_url, e)
            return None
        try:
            if not _is_success(resp.status_code):
                logger.debug("HEAD probe for %s returned %s, falling back to GET", image_url, resp.status_code)
                return None
            return {
                "content_type": resp.headers.get("Content-Type", ""),
                "content_length": _parse_length(resp.headers.get("Content-Length")),
            }
        finally:
            resp.close()

    def fetch(self, image_url: str) -> dict:
        max_bytes = self.config.max_bytes
        head_type = ""
        probe = self.probe(image_url)
        if probe is not None:
            head_type = probe["content_type"]
            length = probe["content_length"]
            if length is not None and length > max_bytes:
                logger.warning("Rejecting %s: HEAD reports %d bytes", image_url, length)
                raise PayloadTooLargeError(max_bytes)

        with self._session.get(image_url, stream=True, allow_redirects=True, timeout=self.config.timeout) as resp:
            if not _is_success(resp.status_code):
                logger.warning("GET %s returned %s", image_url, resp.status_code)
                raise UpstreamFetchError(resp.status_code)

            content_type = head_type or resp.headers.get("Content-Type", "") or ""
            # Some origins omit the header entirely; only an explicit non-image type is rejected.
            if content_type and not content_type.strip().lower().startswith("image/"):
                logger.warning("Rejecting %s: content-type %r", image_url, content_type)
                raise UnsupportedMediaTypeError(content_type)

            data = self._read_limited(resp, max_bytes)
            if data is None:
                logger.warning("Rejecting %s: body exceeds %d bytes", image_url, max_bytes)
                raise PayloadTooLargeError(max_bytes)

            return {
                "url": resp.url or image_url,
                "content_type": content_type,
                "content": data,
            }

    def _read_limited(self, resp: requests.Response, max_bytes: int) -> Optional[bytes]:
        buf = bytearray()
        for chunk in resp.iter_content(chunk_size=self.config.chunk_size):
            if not chunk:
                continue
            buf.extend(chunk)
            if len(buf) > max_bytes:
                return None
        return bytes(buf)
