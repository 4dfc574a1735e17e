from dataclasses import dataclass, field


@dataclass
class FetchedImage:
    url: str
    data: bytes = field(repr=False)
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class CaptionResult:
    text: str
    image_url: str
