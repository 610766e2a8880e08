from datetime import datetime
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from projecthub.config import settings
from projecthub.core.errors import conflict_error, invalid_credentials_error, forbidden_error, unauthorized_error
from projecthub.core.logger import logger
from projecthub.models.user import User, UserRole
from projecthub.schemas.auth import Principal
from projecthub.utils.security import hash_password, verify_password, create_access_token, decode_token

def normalize_email(email: str) -> str:
    return email.strip().lower()

def issue_token(user: User) -> str:
    return create_access_token(
        str(user.id),
        {"name": user.name, "email": user.email, "role": user.role},
    )

def register_user(db: Session, name: str, email: str, password: str, role: UserRole) -> tuple[User, str]:
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise conflict_error("User with this email already exists")
    user = User(name=name.strip(), email=email, password_hash=hash_password(password), role=UserRole(role).value)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent registration won the unique index
        db.rollback()
        raise conflict_error("User with this email already exists")
    db.refresh(user)
    logger.info("Registered user {} with role {}", user.id, user.role)
    return user, issue_token(user)

def login_user(db: Session, email: str, password: str) -> tuple[User, str]:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for {}", normalize_email(email))
        raise invalid_credentials_error()
    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user, issue_token(user)

def verify_token(token: str | None) -> Principal:
    """Decode a bearer token into the caller's principal.

    A missing token is ``UNAUTHORIZED``; a token that is malformed, tampered
    with or expired is ``FORBIDDEN``.
    """
    if not token:
        raise unauthorized_error()
    try:
        payload = decode_token(token)
        return Principal(
            id=int(payload["sub"]),
            name=payload["name"],
            email=payload["email"],
            role=payload["role"],
        )
    except (JWTError, KeyError, ValueError, TypeError) as exc:
        logger.debug("Token verification failed: {}", exc)
        raise forbidden_error()

def ensure_default_faculty(db: Session) -> User | None:
    """Create the bootstrap faculty account when no faculty user exists yet."""
    if db.query(User).filter(User.role == UserRole.FACULTY.value).count() > 0:
        return None
    email = normalize_email(settings.default_faculty_email)
    if db.query(User).filter(User.email == email).first():
        logger.warning("Cannot seed faculty account, {} is already registered", email)
        return None
    user = User(
        name=settings.default_faculty_name,
        email=email,
        password_hash=hash_password(settings.default_faculty_password),
        role=UserRole.FACULTY.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Default faculty account created: {}", user.email)
    return user
