from fastapi import APIRouter, Depends, status

from farmledger.api.core.errors import AppError, ValidationError
from farmledger.api.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
)
from farmledger.api.repositories.user import UserRepository, get_user_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.user import TokenResponse, UserCreate, UserLogin, UserResponse
from farmledger.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


def _token_for(user) -> TokenResponse:
    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/register", response_model=Envelope[TokenResponse], status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    users: UserRepository = Depends(get_user_repository),
):
    """
    Register a new user and return an access token

    Emails are stored lower-cased and must be unique.
    """
    email = user_data.email.lower()
    if await users.get_by_email(email) is not None:
        raise ValidationError("Email is already registered")

    user = await users.create({
        "email": email,
        "password_hash": get_password_hash(user_data.password),
        "name": user_data.name,
    })
    logger.info(f"Registered user {user.id}")
    return Envelope(data=_token_for(user), message="User registered successfully")


@router.post("/login", response_model=Envelope[TokenResponse])
async def login(
    credentials: UserLogin,
    users: UserRepository = Depends(get_user_repository),
):
    """Exchange email and password for a bearer token"""
    user = await users.get_by_email(credentials.email)
    if user is None or not verify_password(credentials.password, user.password_hash):
        raise InvalidCredentials("Invalid email or password")
    return Envelope(data=_token_for(user), message="Login successful")
