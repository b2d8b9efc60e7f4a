from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from carelink.features.auth.models import User, Role
from carelink.features.auth.service import AuthService
from carelink.core.security import decode_token
from carelink.shared.exceptions import CredentialsException, ForbiddenException


# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """
    Dependency to get current authenticated user.
    
    Args:
        credentials: HTTP Bearer credentials
        
    Returns:
        User: Current authenticated user
        
    Raises:
        CredentialsException: If credentials are invalid
    """
    token = credentials.credentials
    
    payload = decode_token(token)
    if payload is None:
        raise CredentialsException("Invalid authentication credentials")
    
    uid: str = payload.get("sub")
    if uid is None:
        raise CredentialsException("Invalid authentication credentials")
    
    user = await AuthService.get_user_by_uid(uid)
    if user is None:
        raise CredentialsException("User not found")
    
    if not user.is_active:
        raise CredentialsException("Inactive user")
    
    return user


def require_roles(*roles: Role):
    """
    Dependency factory restricting a route to the given roles.

    Usage:
        current_user: User = Depends(require_roles(Role.DOCTOR))
    """
    allowed = set(roles)

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenException(
                f"This action requires one of: {', '.join(sorted(r.value for r in allowed))}"
            )
        return current_user

    return checker


def require_hospital(current_user: User = Depends(get_current_user)) -> str:
    """Hospital the current user works in."""
    if not current_user.hospital_id:
        raise ForbiddenException("You are not associated with a hospital")
    return current_user.hospital_id
