import logging
from typing import Optional

from captioner.data.adapters.workers_ai_client import WorkersAiClient
from captioner.domain.entities.caption_entity import FetchedImage
from captioner.domain.repositories.caption_repository import CaptionRepository


logger = logging.getLogger(__name__)


class CaptionRepositoryImpl(CaptionRepository):
    def __init__(self, client: WorkersAiClient, model: str, prompt: str, max_tokens: int = 512) -> None:
        self._client = client
        self._model = model
        self._prompt = prompt
        self._max_tokens = max_tokens

    def describe(self, image: FetchedImage) -> Optional[str]:
        inputs = {
            "image": list(image.data),
            "prompt": self._prompt,
            "max_tokens": self._max_tokens,
        }
        logger.debug("Running %s on %d bytes", self._model, image.size)
        raw = self._client.run(self._model, inputs)
        description = raw.get("description")
        return description if isinstance(description, str) else None
