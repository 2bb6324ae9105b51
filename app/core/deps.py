"""Dependencies for route handlers"""
from typing import Annotated
from fastapi import Depends, Header, Request

from app.core.errors import NotAuthenticated
from app.services import Services


def get_services(request: Request) -> Services:
    """Service container built at application start-up."""
    return request.app.state.services


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Get current user id.

    The identity provider's gateway authenticates the caller and forwards the
    stable user id in the ``X-User-Id`` header.

    Raises:
        NotAuthenticated: If the header is missing or empty
    """
    if x_user_id is None or not x_user_id.strip():
        raise NotAuthenticated()
    return x_user_id.strip()


ServicesDep = Annotated[Services, Depends(get_services)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
