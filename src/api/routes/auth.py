"""Authentication routes.

This module handles HTTP endpoints for registration, login, the caller's own
profile and session token maintenance.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import JwtManagerDep, UserManagerDep
from core.exceptions import InvalidTokenError
from schemas.auth import AuthResponse, TokenClaims, TokenRequest, TokenValidationResponse
from schemas.user import (
    CreateUserRequest,
    LoginRequest,
    UpdateUserRequest,
    User,
    UserResponse,
)
from utils.jwt_manager import JwtManager
from utils.user_manager import UserAlreadyExistsError, UserManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security. Missing credentials are reported as 401 below
# rather than by FastAPI.
security = HTTPBearer(auto_error=False)


def verify_token(
    request: Request,
    jwt_manager: JwtManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenClaims:
    """Verify JWT token from Authorization header.

    The validated claims are also attached to ``request.state.token_claims``.

    Args:
        request: Incoming request.
        jwt_manager: Injected JwtManager instance.
        credentials: HTTP Bearer token credentials.

    Returns:
        Decoded token claims.

    Raises:
        HTTPException: If the token is missing, invalid or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = jwt_manager.validate_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.token_claims = claims
    return claims


def get_current_user_id(token_claims: TokenClaims = Depends(verify_token)) -> str:
    """Get the id of the authenticated user from the token claims.

    Raises:
        HTTPException: If the claims carry no user id.
    """
    user_id = token_claims.user_id
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return user_id


def ensure_identity_available(
    user_manager: UserManager,
    username: Optional[str],
    email: Optional[str],
    user_id: Optional[str] = None,
) -> None:
    """Reject a username or email that already belongs to another user.

    This is a friendly early check only; the unique indexes are what really
    enforce uniqueness.

    Args:
        user_manager: UserManager instance.
        username: Requested username, if any.
        email: Requested email, if any.
        user_id: Id of the user being updated, whose own values are allowed.

    Raises:
        HTTPException: 400 if either value is taken.
    """
    if username:
        existing = user_manager.get_user_by_username(username)
        if existing is not None and existing.id != user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Username '{username}' is already taken",
            )
    if email:
        existing = user_manager.get_user_by_email(email)
        if existing is not None and existing.id != user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Email '{email}' is already registered",
            )


def _build_auth_response(user: User, jwt_manager: JwtManager) -> AuthResponse:
    token = jwt_manager.create_access_token(user)
    return AuthResponse(
        token=token,
        expires_at=jwt_manager.get_token_expiration(token),
        user=UserResponse.from_user(user),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register and sign in",
)
def register(
    req: CreateUserRequest,
    user_manager: UserManagerDep,
    jwt_manager: JwtManagerDep,
) -> AuthResponse:
    """Register a new user and return a session token.

    Args:
        req: Registration data.
        user_manager: Injected UserManager instance.
        jwt_manager: Injected JwtManager instance.

    Returns:
        AuthResponse with the token, its expiry and the new user.

    Raises:
        HTTPException: 400 if the username or email is taken.
    """
    ensure_identity_available(user_manager, req.username, req.email)
    try:
        user = user_manager.create_user(req)
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    logger.info("User %s registered successfully", user.username)
    return _build_auth_response(user, jwt_manager)


@router.post("/login", response_model=AuthResponse, summary="Sign in")
def login(
    req: LoginRequest,
    user_manager: UserManagerDep,
    jwt_manager: JwtManagerDep,
) -> AuthResponse:
    """Login with username or email and password.

    Raises:
        HTTPException: 401 if the credentials are wrong or the account is
            deactivated.
    """
    user = user_manager.authenticate(req.username_or_email, req.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username/email or password",
        )
    return _build_auth_response(user, jwt_manager)


@router.get("/profile", response_model=UserResponse, summary="Get own profile")
def get_profile(
    user_manager: UserManagerDep,
    user_id: str = Depends(get_current_user_id),
) -> UserResponse:
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserResponse.from_user(user)


@router.put("/profile", response_model=UserResponse, summary="Update own profile")
def update_profile(
    req: UpdateUserRequest,
    user_manager: UserManagerDep,
    user_id: str = Depends(get_current_user_id),
) -> UserResponse:
    """Update the authenticated user's profile.

    Raises:
        HTTPException: 400 on a taken username/email, 404 if the user is gone.
    """
    ensure_identity_available(user_manager, req.username, req.email, user_id=user_id)
    try:
        user = user_manager.update_user(user_id, req)
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    logger.info("User %s updated profile successfully", user_id)
    return UserResponse.from_user(user)


@router.post(
    "/validate-token",
    response_model=TokenValidationResponse,
    summary="Validate a token",
)
def validate_token(
    req: TokenRequest,
    jwt_manager: JwtManagerDep,
) -> TokenValidationResponse:
    """Check a token passed in the body and return its claims.

    Raises:
        HTTPException: 400 if the token is invalid or expired.
    """
    claims = jwt_manager.validate_token(req.token)
    if claims is None or jwt_manager.is_token_expired(req.token):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_rejection_reason(jwt_manager, req.token),
        )

    return TokenValidationResponse(
        is_valid=True,
        user_id=claims.user_id,
        username=claims.username,
        email=claims.email,
        role=claims.role,
        expires_at=jwt_manager.get_token_expiration(req.token),
    )


def _rejection_reason(jwt_manager: JwtManager, token: str) -> str:
    try:
        jwt_manager.get_token_expiration(token)
    except InvalidTokenError:
        return "Invalid token"
    if jwt_manager.is_token_expired(token):
        return "Token has expired"
    return "Invalid token"


@router.post("/refresh", response_model=AuthResponse, summary="Issue a fresh token")
def refresh_token(
    user_manager: UserManagerDep,
    jwt_manager: JwtManagerDep,
    user_id: str = Depends(get_current_user_id),
) -> AuthResponse:
    """Issue a new token for the authenticated user.

    The presented token is not revoked; it stays valid until it expires.

    Raises:
        HTTPException: 404 if the user is gone, 401 if deactivated.
    """
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is deactivated",
        )

    logger.info("Token refreshed for user %s", user_id)
    return _build_auth_response(user, jwt_manager)


@router.post("/logout", summary="Sign out")
def logout(user_id: str = Depends(get_current_user_id)) -> dict:
    """Logout endpoint.

    Note: Since we're using stateless JWT tokens, logout is handled
    client-side by removing the token. The token itself remains valid until
    it expires.

    Returns:
        Dictionary with success message.
    """
    logger.info("User %s logged out", user_id)
    return {"success": True, "message": "Logged out successfully"}
