#run it with portfolio-server, or uvicorn portfolio.main:app --reload
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from dotenv import load_dotenv
from pathlib import Path
from typing import Optional
import logging

from portfolio.api.api_router import api_router
from portfolio.core.config import Settings, check_required, load_settings
from portfolio.core.mailer import Mailer
from portfolio.core.rate_limit import limiter
from portfolio.core.security import SecurityHeadersMiddleware
from portfolio.core.static import SPAStaticFiles

# Load environment variables from .env file
load_dotenv()

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Internal server error."},
    )


def create_app(settings: Settings, mailer: Optional[Mailer] = None) -> FastAPI:
    """
    Build the portfolio application.

    Args:
        settings: Configuration loaded once at process entry
        mailer: Mail transport; built from settings when not given

    Returns:
        FastAPI: app serving the contact API and the static site
    """
    logging.getLogger().setLevel(settings.log_level.upper())
    check_required(settings)

    app = FastAPI(title="Portfolio", version="1.0.0")
    app.state.settings = settings
    app.state.mailer = mailer or Mailer(settings)
    app.state.limiter = limiter

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Added last-first: security headers wrap CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(api_router)

    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "mail_configured": app.state.mailer.configured,
        }

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", SPAStaticFiles(directory=static_dir), name="static")
    else:
        logger.warning(f"⚠️ Static directory '{static_dir}' not found, site will not be served")

    return app


app = create_app(load_settings())


def run():
    """Console entry point: serve the app with uvicorn"""
    import uvicorn

    settings = app.state.settings
    logger.info(f"🚀 Server running → http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
