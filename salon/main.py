import logging

from fastapi import FastAPI

from salon.api.sessions import router as sessions_router
from salon.core.config import settings


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("session_id", "epoch", "stage", "asset_id", "storage_id", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="AI Salon", version="1.0.0")

app.include_router(sessions_router, tags=["sessions"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
