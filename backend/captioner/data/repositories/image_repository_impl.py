from captioner.data.adapters.image_http_client import ImageHttpClient
from captioner.domain.entities.caption_entity import FetchedImage
from captioner.domain.repositories.image_repository import ImageRepository


class ImageRepositoryImpl(ImageRepository):
    def __init__(self, client: ImageHttpClient) -> None:
        self._client = client

    def fetch(self, image_url: str) -> FetchedImage:
        raw = self._client.fetch(image_url)
        return FetchedImage(
            url=str(raw.get("url") or image_url),
            data=raw["content"],
            content_type=str(raw.get("content_type") or ""),
        )
