from fastapi import Depends, HTTPException, status

from models.authModel.authModel import AuthUser
from utils.utils import get_current_user


def allow_roles(allowed_roles: list[str]):
    """Dependency factory: the authenticated user, if their role is allowed."""
    allowed_roles_normalized = [r.strip().lower() for r in allowed_roles]

    async def checker(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if (user.role or "").strip().lower() not in allowed_roles_normalized:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied: Unauthorized role",
            )
        return user

    return checker


admin_only = allow_roles(["admin"])
