import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import bcrypt
from dotenv import load_dotenv
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.orm import Session
from starlette import status

from placehub.database.database import db_dependency
from placehub.database.models import User
from placehub.database.schemas import AuthContext

load_dotenv()

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", 7))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 14))

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="auth/token")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))


def authenticate_user(username: str, password: str, db: Session):
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def _encode(username: str, user_id: int, expires_delta: timedelta, token_type: str) -> str:
    expires = datetime.now(timezone.utc) + expires_delta
    payload = {"sub": username, "id": user_id, "type": token_type, "exp": expires}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(username: str, user_id: int, expires_delta: timedelta) -> str:
    return _encode(username, user_id, expires_delta, "access")


def create_refresh_token(username: str, user_id: int, expires_delta: timedelta) -> str:
    return _encode(username, user_id, expires_delta, "refresh")


def decode_token(token: str) -> dict:
    """Decode and verify a token, raising JWTError if it is invalid or expired."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])


def token_expired(token: str) -> bool:
    try:
        decode_token(token)
    except ExpiredSignatureError:
        return True
    except JWTError:
        return False
    return False


def issue_tokens(user: User) -> dict:
    return {
        "access_token": create_access_token(user.username, user.id, timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)),
        "refresh_token": create_refresh_token(user.username, user.id, timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)),
        "token_type": "bearer",
    }


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(token: Annotated[str, Depends(oauth2_bearer)], db: db_dependency) -> AuthContext:
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired.")
    except JWTError:
        raise _unauthorized("Could not validate user.")

    if payload.get("type") != "access" or payload.get("id") is None:
        raise _unauthorized("Could not validate user.")

    user = db.get(User, payload["id"])
    if user is None:
        logger.warning(f"Token for unknown user id {payload['id']}")
        raise _unauthorized("Could not validate user.")

    return AuthContext(id=user.id, name=user.name or user.username)


user_dependency = Annotated[AuthContext, Depends(get_current_user)]
