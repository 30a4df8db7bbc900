"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request

from question_api.auth.tokens import verify_access
from question_api.db.models import ROLE_ADMIN
from question_api.errors import Forbidden


@dataclass
class CurrentUser:
    id: str
    email: str
    role: str
    company_id: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via Bearer access token. Raises InvalidToken."""
    token = _extract_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")

    claims = verify_access(token)
    user = CurrentUser(
        id=claims["userId"],
        email=claims.get("email", ""),
        role=claims.get("role", ""),
        company_id=claims["companyId"],
    )
    request.state.user_id = user.id
    return user


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise Forbidden()
    return user
