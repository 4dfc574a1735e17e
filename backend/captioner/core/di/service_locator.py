from typing import Optional

from captioner.core.config.environment_config import EnvironmentConfig
from captioner.core.utils.logger import get_logger
from captioner.data.adapters.image_http_client import ImageHttpClient, ImageHttpConfig
from captioner.data.adapters.workers_ai_client import WorkersAiClient, WorkersAiConfig
from captioner.data.repositories.caption_repository_impl import CaptionRepositoryImpl
from captioner.data.repositories.image_repository_impl import ImageRepositoryImpl
from captioner.domain.usecases.describe_image_usecase import DescribeImageUseCase


_logger = get_logger("service_locator")


class ServiceLocator:
    _config: Optional[EnvironmentConfig] = None
    _image_http_client: Optional[ImageHttpClient] = None
    _image_repo: Optional[ImageRepositoryImpl] = None
    _workers_ai_client: Optional[WorkersAiClient] = None
    _caption_repo: Optional[CaptionRepositoryImpl] = None
    _describe_usecase: Optional[DescribeImageUseCase] = None

    @classmethod
    def config(cls) -> EnvironmentConfig:
        if cls._config is None:
            cls._config = EnvironmentConfig()
            _logger.info(
                "APP_ENV=%s CAPTION_MODEL=%s CLOUDFLARE_API_TOKEN=%s MAX_IMAGE_BYTES=%d",
                cls._config.app_env,
                cls._config.caption_model,
                "SET" if cls._config.cloudflare_api_token else "MISSING",
                cls._config.max_image_bytes,
            )
        return cls._config

    @classmethod
    def image_http_client(cls) -> ImageHttpClient:
        if cls._image_http_client is None:
            cfg = cls.config()
            cls._image_http_client = ImageHttpClient(
                config=ImageHttpConfig(max_bytes=cfg.max_image_bytes, timeout=cfg.fetch_timeout)
            )
        return cls._image_http_client

    @classmethod
    def image_repo(cls) -> ImageRepositoryImpl:
        if cls._image_repo is None:
            cls._image_repo = ImageRepositoryImpl(client=cls.image_http_client())
        return cls._image_repo

    @classmethod
    def workers_ai_client(cls) -> WorkersAiClient:
        if cls._workers_ai_client is None:
            cfg = cls.config()
            client_cfg = WorkersAiConfig(
                account_id=cfg.cloudflare_account_id,
                token=cfg.cloudflare_api_token,
                base_url=cfg.workers_ai_base,
                timeout=cfg.inference_timeout,
            )
            cls._workers_ai_client = WorkersAiClient(config=client_cfg)
        return cls._workers_ai_client

    @classmethod
    def caption_repo(cls) -> CaptionRepositoryImpl:
        if cls._caption_repo is None:
            cfg = cls.config()
            cls._caption_repo = CaptionRepositoryImpl(
                client=cls.workers_ai_client(),
                model=cfg.caption_model,
                prompt=cfg.caption_prompt,
                max_tokens=cfg.caption_max_tokens,
            )
        return cls._caption_repo

    @classmethod
    def describe_usecase(cls) -> DescribeImageUseCase:
        if cls._describe_usecase is None:
            cls._describe_usecase = DescribeImageUseCase(
                image_repository=cls.image_repo(),
                caption_repository=cls.caption_repo(),
                image_delivery_url_template=cls.config().image_delivery_url_template,
            )
        return cls._describe_usecase
