from abc import ABC, abstractmethod
from typing import Optional

from captioner.domain.entities.caption_entity import FetchedImage


class CaptionRepository(ABC):
    @abstractmethod
    def describe(self, image: FetchedImage) -> Optional[str]:
        """Return the raw description produced by the model, or None if it gave none."""
        raise NotImplementedError
