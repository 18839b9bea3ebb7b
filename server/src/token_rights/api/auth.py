"""Caller identification for API requests.

The host environment is trusted to have authenticated the caller; the API
only needs to know which address an operation is performed as.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from token_rights.models.events import ZERO_ADDRESS

logger = logging.getLogger(__name__)


async def get_caller(
    x_caller: Annotated[str | None, Header()] = None,
) -> str:
    """Read the acting address from the X-Caller header.

    Raises:
        HTTPException: If the header is missing or is the zero address
    """
    if not x_caller or x_caller == ZERO_ADDRESS:
        logger.warning("Request without a usable X-Caller header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Caller header required",
        )
    return x_caller


# Type alias for dependency injection
Caller = Annotated[str, Depends(get_caller)]
