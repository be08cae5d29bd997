from fastapi import FastAPI

from whiphash.api.routes.passwords import router as passwords_router
from whiphash.core.config import settings
from whiphash.core.logging import configure_logging


configure_logging(settings.log_level)

app = FastAPI(title="whiphash", version="0.1.0")

app.include_router(passwords_router)


@app.get("/health")
def health():
    return {"status": "ok"}
