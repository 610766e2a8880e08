
from fastapi import Request, Depends
from projecthub.db.session import SessionLocal
from projecthub.auth.service import verify_token
from projecthub.core.errors import unauthorized_error, insufficient_permissions_error
from projecthub.models.user import UserRole
from projecthub.schemas.auth import Principal


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None

def get_principal(token: str | None = Depends(get_bearer_token)) -> Principal:
    return verify_token(token)

def require_role(*roles: UserRole):
    """Dependency factory gating a route to the given roles."""
    allowed = tuple(UserRole(r) for r in roles)

    def _check(principal: Principal = Depends(get_principal)) -> Principal:
        if principal is None:
            raise unauthorized_error("Authentication required")
        if not principal.has_role(*allowed):
            raise insufficient_permissions_error([r.value for r in allowed])
        return principal

    return _check

require_faculty = require_role(UserRole.FACULTY)
require_fourth_year = require_role(UserRole.STUDENT_FOURTH)
require_student = require_role(UserRole.STUDENT_THIRD, UserRole.STUDENT_FOURTH)
