import os
import time
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from aipulse import settings
from aipulse.reader import loader
from aipulse.reader.categories import CategoryFilter
from aipulse.reader.view import ReaderState, build_page_context
from aipulse.storage import repository
from aipulse.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

READER_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "reader")
TEMPLATES_DIR = os.path.join(READER_DIR, "templates")
STATIC_DIR = os.path.join(READER_DIR, "static")

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def snapshot_url(request: Request) -> str:
    # SNAPSHOT_URL (se definido) ou relativo à URL base publicada
    if settings.SNAPSHOT_URL:
        return settings.SNAPSHOT_URL
    return str(request.base_url) + settings.SNAPSHOT_REL_PATH


#%% APP

app = FastAPI(title="AI Pulse")

# O snapshot é um asset estático; pode ser lido por um reader hospedado em outro lugar
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=512)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/health")
def health():
    return {"status": "ok", "ts": int(time.time())}


@app.get("/data/current.json")
def current_snapshot():
    path = repository.SNAPSHOT_PATH
    if not os.path.exists(path):
        raise HTTPException(404, "Snapshot not found")
    return FileResponse(path, media_type="application/json", headers={"Cache-Control": "no-cache"})


@app.get("/", response_class=HTMLResponse)
async def reader(
    request: Request,
    category: CategoryFilter = CategoryFilter.all,
    article: Optional[str] = None,
):
    result = await loader.load_snapshot(snapshot_url(request))

    state = ReaderState()
    state.set_category(category)
    if article and result.snapshot is not None:
        state.select(article, result.snapshot.news)

    context = build_page_context(result, state)
    return templates.TemplateResponse(request, "index.html", context)


def main() -> None:
    import uvicorn

    setup_logging()
    uvicorn.run(
        "aipulse.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
