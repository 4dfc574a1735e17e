"""Errors raised while turning an image reference into a caption.

Each error carries the HTTP status it is reported with; the presentation
layer turns them into ``{"code": ..., "message": ...}`` bodies.
"""


class CaptionServiceError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(CaptionServiceError, ValueError):
    status_code = 400


class UpstreamFetchError(CaptionServiceError):
    # Final 1xx/3xx statuses are reported as 502
    def __init__(self, status: int) -> None:
        super().__init__(f"Failed to fetch image (status {status})", status_code=status if status >= 400 else 502)
        self.upstream_status = status


class PayloadTooLargeError(CaptionServiceError):
    status_code = 413

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"Image too large (> {max_bytes} bytes)")
        self.max_bytes = max_bytes


class UnsupportedMediaTypeError(CaptionServiceError):
    status_code = 415

    def __init__(self, content_type: str) -> None:
        super().__init__(f'Unsupported content-type: "{content_type}". Only images are allowed.')
        self.content_type = content_type


class InferenceEmptyResultError(CaptionServiceError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("Failed to get image description")
