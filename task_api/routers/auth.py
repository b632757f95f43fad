import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_claim, get_token_service
from ..auth.passwords import get_password_hash, verify_password
from ..auth.tokens import TokenClaim, TokenService
from ..database import get_db
from ..errors import AppError, AuthError, ConflictError, InternalError, NotFoundError, ValidationError
from ..models import User
from ..responses import envelope
from ..schemas.user import AuthPayload, LoginRequest, RegisterRequest, UserProfile, UserPublic

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid credentials"


def _auth_payload(user: User, token: str) -> AuthPayload:
    return AuthPayload(user=UserPublic.model_validate(user), token=token)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Create a new user account and return it with a bearer token."""
    if not payload.username or not payload.email or not payload.password:
        raise ValidationError("Please provide all required fields")

    try:
        existing = (
            db.query(User)
            .filter(or_(User.email == payload.email, User.username == payload.username))
            .first()
        )
        if existing:
            raise ConflictError("User with this email or username already exists")

        hashed_password = get_password_hash(
            payload.password, request.app.state.settings.bcrypt_rounds
        )
        user = User(
            username=payload.username,
            email=payload.email,
            hashed_password=hashed_password,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        token = tokens.create_access_token(user.id, user.email)
    except AppError:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Registration failed")
        raise InternalError("Error registering user", error=str(exc)) from exc

    logger.info("Registered user %s (%s)", user.username, user.id)
    return envelope(
        True,
        message="User registered successfully",
        data=_auth_payload(user, token),
    )


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Sign in with email and password and get a bearer token."""
    if not payload.email or not payload.password:
        raise ValidationError("Please provide email and password")

    try:
        user = db.query(User).filter(User.email == payload.email).first()
        if user is None:
            raise AuthError(INVALID_CREDENTIALS)

        if not verify_password(payload.password, user.hashed_password):
            raise AuthError(INVALID_CREDENTIALS)

        token = tokens.create_access_token(user.id, user.email)
    except AuthError:
        logger.info("Failed login attempt")
        raise
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Login failed")
        raise InternalError("Error logging in", error=str(exc)) from exc

    logger.info("Login: %s (%s)", user.username, user.id)
    return envelope(True, message="Login successful", data=_auth_payload(user, token))


@router.get("/me")
def read_users_me(
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
):
    """Get current user information."""
    try:
        user = db.query(User).filter(User.id == claim.user_id).first()
    except Exception as exc:
        logger.exception("Fetching current user failed")
        raise InternalError("Error fetching user", error=str(exc)) from exc

    if user is None:
        raise NotFoundError("User not found")
    return envelope(True, data=UserProfile.model_validate(user))
