from typing import Optional
from urllib.parse import quote, urlsplit

from captioner.core.utils.logger import get_logger
from captioner.domain.entities.caption_entity import CaptionResult
from captioner.domain.errors import InferenceEmptyResultError, InputError
from captioner.domain.repositories.caption_repository import CaptionRepository
from captioner.domain.repositories.image_repository import ImageRepository


_logger = get_logger("describe_image_usecase")

ALLOWED_SCHEMES = ("http", "https")
# Characters a URL host may never contain
_FORBIDDEN_HOST_CHARS = frozenset(" \t\r\n<>^|\"`{}\\")
# encodeURIComponent leaves these unescaped on top of letters, digits and "_.-~"
_IMAGE_ID_SAFE_CHARS = "!*'()"


def build_delivery_url(template: str, image_id: str) -> str:
    return template.format(image_id=quote(image_id, safe=_IMAGE_ID_SAFE_CHARS))


def validate_image_url(image_url: str) -> str:
    candidate = image_url.strip()
    try:
        parts = urlsplit(candidate)
        parts.port  # raises on a malformed port
    except ValueError:
        raise InputError("Invalid URL")
    if not parts.scheme:
        raise InputError("Invalid URL")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InputError("Only http(s) URLs are allowed")
    if not parts.hostname or any(ch in _FORBIDDEN_HOST_CHARS for ch in parts.hostname):
        raise InputError("Invalid URL")
    return candidate


class DescribeImageUseCase:
    def __init__(
        self,
        image_repository: ImageRepository,
        caption_repository: CaptionRepository,
        image_delivery_url_template: str,
    ) -> None:
        self._images = image_repository
        self._captions = caption_repository
        self._delivery_template = image_delivery_url_template

    def resolve_image_url(self, url: Optional[str] = None, image_id: Optional[str] = None) -> str:
        """Pick the image location: an explicit URL wins over a legacy image id."""
        if url:
            return url
        if image_id:
            return build_delivery_url(self._delivery_template, image_id)
        raise InputError("Missing input (url or image_id)")

    def execute(self, url: Optional[str] = None, image_id: Optional[str] = None) -> CaptionResult:
        image_url = validate_image_url(self.resolve_image_url(url=url, image_id=image_id))
        image = self._images.fetch(image_url)
        _logger.debug("Fetched %d bytes (%s) from %s", image.size, image.content_type or "no content-type", image.url)

        description = self._captions.describe(image)
        text = description.rstrip() if isinstance(description, str) else ""
        if not text:
            raise InferenceEmptyResultError()
        return CaptionResult(text=text, image_url=image_url)
