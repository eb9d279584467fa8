from pathlib import Path
from typing import Optional, Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from flexpress.backend import QueryBackend
from flexpress.config import CORS_ORIGINS, HOST, PORT, defaults, logger

INDEX_HTML = Path(__file__).parent / "flexpress" / "static" / "index.html"


class Event(BaseModel):
    type: str
    session_id: Optional[str] = None
    payload: Optional[Any] = None


def create_app(backend: Optional[QueryBackend] = None) -> FastAPI:
    app = FastAPI(title="Flexpress")
    app.state.backend = backend if backend is not None else QueryBackend()

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=HTMLResponse)
    async def index():
        try:
            return INDEX_HTML.read_text(encoding="utf-8")
        except OSError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/defaults")
    async def get_defaults():
        return defaults()

    @app.post("/events")
    async def send_event(event: Event):
        try:
            return await app.state.backend.process_request(event.model_dump())
        except Exception as e:
            logger.exception("Error processing event type=%s", event.type)
            raise HTTPException(status_code=500, detail=str(e))

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
