from fastapi import FastAPI

from app.config import settings
from app.logging_config import setup_logging
from app.quest.router import router as quest_router

setup_logging(settings.log_level)

app = FastAPI(title="EternalQuest", version="0.1.0")
app.include_router(quest_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "quest": {
            "goals": "/quest/goals",
            "record_event": "/quest/goals/{index}/events",
            "score": "/quest/score",
            "save": "/quest/save",
            "load": "/quest/load",
            "presets": "/quest/presets",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
