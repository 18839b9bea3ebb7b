"""FastAPI application entry point for Token Rights."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from token_rights import __version__
from token_rights.api.errors import registry_error_handler
from token_rights.api.routes import get_privileges, get_token, router
from token_rights.config import get_settings
from token_rights.exceptions import RegistryError

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting Token Rights Server v{__version__}")
    settings = get_settings()
    logger.info(f"Debug mode: {settings.debug}")

    token = get_token()
    privileges = get_privileges()
    logger.info(
        f"Token {token.symbol}: default expiration {token.default_expiration()}s; "
        f"{privileges.privilege_total()} privileges per item, admin {privileges.admin}"
    )

    yield

    # Shutdown
    logger.info("Shutting down Token Rights Server")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Token Rights",
        description="Expiring allowances and multi-privilege items",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_exception_handler(RegistryError, registry_error_handler)

    # Include routes
    app.include_router(router)

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "token_rights.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
