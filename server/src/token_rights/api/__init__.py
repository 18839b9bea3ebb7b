"""FastAPI routes for Token Rights."""

from token_rights.api.auth import Caller
from token_rights.api.errors import registry_error_handler
from token_rights.api.routes import router

__all__ = ["Caller", "registry_error_handler", "router"]
