
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt
from projecthub.config import settings

ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)

def create_access_token(subject: str, claims: dict | None = None, expires_minutes: int | None = None) -> str:
    """Sign a token for ``subject`` carrying ``claims`` inline.

    ``expires_minutes`` may be negative, which yields an already expired token.
    """
    minutes = settings.access_token_expire_minutes if expires_minutes is None else expires_minutes
    now = datetime.now(timezone.utc)
    to_encode = dict(claims or {})
    to_encode.update({"sub": subject, "iat": now, "exp": now + timedelta(minutes=minutes)})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
