import os
from dataclasses import dataclass

from dotenv import load_dotenv


# Values from a local .env take precedence over blank container defaults.
try:
    load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"), override=True)
except Exception:
    load_dotenv(override=True)


@dataclass
class EnvironmentConfig:
    app_env: str = os.getenv("APP_ENV", "development")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Workers AI (inference binding)
    cloudflare_account_id: str = os.getenv("CLOUDFLARE_ACCOUNT_ID", "")
    cloudflare_api_token: str = os.getenv("CLOUDFLARE_API_TOKEN", "")
    workers_ai_base: str = os.getenv("WORKERS_AI_API_BASE", "https://api.cloudflare.com/client/v4")
    caption_model: str = os.getenv("CAPTION_MODEL", "@cf/llava-hf/llava-1.5-7b-hf")
    caption_prompt: str = os.getenv("CAPTION_PROMPT", "Generate a caption for this image")
    caption_max_tokens: int = int(os.getenv("CAPTION_MAX_TOKENS", "512"))
    inference_timeout: float = float(os.getenv("INFERENCE_TIMEOUT_SECONDS", "120"))
    # Legacy image_id lookups are resolved against this delivery origin
    image_delivery_url_template: str = os.getenv(
        "IMAGE_DELIVERY_URL_TEMPLATE",
        "https://imagedelivery.net/YOVIzOVFuBiBBmJn2AVFiw/{image_id}/public",
    )
    # 25 MiB
    max_image_bytes: int = int(os.getenv("MAX_IMAGE_BYTES", str(25 * 1024 * 1024)))
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))
