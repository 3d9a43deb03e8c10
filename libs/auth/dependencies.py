from typing import Annotated, Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from libs.auth.models import ClubUser


async def get_current_user(
    request: Request,
    x_club_user: Annotated[Optional[str], Header()] = None,
) -> ClubUser:
    """
    Resolve the acting club user from the ``X-Club-User`` header (a username).
    """
    if not x_club_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Club-User header is required",
        )

    user = request.app.state.club.users.find_by_username(x_club_user)
    if user is None or not user.active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown or inactive club user: {x_club_user}",
        )
    return user


def require_permission(permission: str) -> Callable:
    """
    Build a dependency that lets the request through only when the acting
    user carries ``permission``. Missing permissions surface as 403.
    """

    async def dependency(
        current_user: Annotated[ClubUser, Depends(get_current_user)],
    ) -> ClubUser:
        current_user.require(permission)
        return current_user

    return dependency
