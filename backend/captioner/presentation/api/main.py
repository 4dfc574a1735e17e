from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from captioner.core.di.service_locator import ServiceLocator
from captioner.core.utils.logger import configure_logging
from captioner.presentation.api.v1.caption_router import router as caption_router


configure_logging(ServiceLocator.config().log_level)

app = FastAPI(title="Image Captioner", version="1.0.0")

# Public endpoint: any origin may call it, no credentials involved.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.get("/healthz")
def healthz():
    cfg = ServiceLocator.config()
    return {"status": "ok", "model": cfg.caption_model}


app.include_router(caption_router)


def serve() -> None:
    import uvicorn

    cfg = ServiceLocator.config()
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    serve()
