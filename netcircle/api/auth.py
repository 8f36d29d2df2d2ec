from fastapi import Header, HTTPException, status

from netcircle.config import settings


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:  # noqa: B008
    """Resolve the user a request acts for.

    Identity is established upstream, the header only carries the opaque id.
    """
    user_id = (x_user_id if x_user_id is not None else settings.default_user_id).strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user id",
        )
    return user_id
