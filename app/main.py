import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader

from app.config import settings
from app.errors import ComparisonError
from app.routers import search as search_api
from app.views import compare

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _configure_logging():
    """Attach a console handler to the root logger once per process."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    root.setLevel(logging.DEBUG if settings.debug else settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    logger.info("%s starting with %s backend", settings.app_name, settings.llm_backend)
    yield


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.exception_handler(ComparisonError)
async def comparison_error_handler(request: Request, exc: ComparisonError):
    # callers only see the generic message; the cause stays in the log
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc, exc_info=exc)
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)


# templates
templates_dir = Path(__file__).parent / "templates"
app.state.templates = Environment(loader=FileSystemLoader(str(templates_dir)), autoescape=True)

# patch TemplateResponse onto jinja2 Environment for convenience
from starlette.responses import HTMLResponse


def _template_response(self, name, context):
    template = self.get_template(name)
    html = template.render(**context)
    return HTMLResponse(html)


app.state.templates.TemplateResponse = lambda name, ctx: _template_response(app.state.templates, name, ctx)

# static files
static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# routers
app.include_router(search_api.router)
app.include_router(compare.router)
