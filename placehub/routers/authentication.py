import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from starlette import status

from placehub.database.database import db_dependency
from placehub.database.models import User
from placehub.database.schemas import CreateUserRequest, RefreshTokenRequest, Token
from placehub.utils.auth_helpers import authenticate_user, decode_token, hash_password, issue_tokens, token_expired

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix='/auth',
    tags=['Authentication']
)


@router.post("/create-user", status_code=status.HTTP_201_CREATED)
async def create_user(db: db_dependency, create_user_request: CreateUserRequest):
    existing_user = db.query(User).filter(User.username == create_user_request.username).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken. Please choose a different username."
        )

    create_user_model = User(
        username=create_user_request.username,
        name=create_user_request.name,
        hashed_password=hash_password(create_user_request.password)
    )
    db.add(create_user_model)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Database integrity error. Possibly duplicate data."
        )

    logger.info(f"User {create_user_model.id} registered")
    return {
        "message": "User created successfully",
        "user": {"id": create_user_model.id, "name": create_user_model.name or create_user_model.username},
    }


# ----------------------------
# Login with Username & Password
# ----------------------------
@router.post("/token", response_model=Token)
async def login_for_access_token(db: db_dependency, form_data: Annotated[OAuth2PasswordRequestForm, Depends()]):
    user = authenticate_user(form_data.username, form_data.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate user."
        )
    return issue_tokens(user)


# ----------------------------
# Refresh Token
# ----------------------------
@router.post("/refresh", response_model=Token)
async def refresh_access_token(db: db_dependency, refresh_token_request: RefreshTokenRequest):
    token = refresh_token_request.refresh_token
    if token_expired(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token is expired."
        )

    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate refresh token."
        )

    user_id = payload.get("id")
    user = None
    if payload.get("type") == "refresh" and user_id is not None:
        user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate refresh token."
        )
    return issue_tokens(user)
