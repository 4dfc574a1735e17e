from abc import ABC, abstractmethod

from captioner.domain.entities.caption_entity import FetchedImage


class ImageRepository(ABC):
    @abstractmethod
    def fetch(self, image_url: str) -> FetchedImage:
        """Download the image behind ``image_url``.

        Implementations raise ``UpstreamFetchError``, ``PayloadTooLargeError``
        or ``UnsupportedMediaTypeError`` when the origin response is unusable.
        """
        raise NotImplementedError
