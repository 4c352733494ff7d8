"""User management routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from api.routes.auth import ensure_identity_available, get_current_user_id
from core.dependencies import UserManagerDep
from schemas.user import (
    CreateUserRequest,
    LoginRequest,
    UpdateUserRequest,
    UserResponse,
    UserRole,
)
from utils.user_manager import UserAlreadyExistsError

router = APIRouter(prefix="/api/user", tags=["User"])


def _public(users) -> List[UserResponse]:
    return [UserResponse.from_user(user) for user in users]


@router.get("", response_model=List[UserResponse], summary="List users")
def list_users(user_manager: UserManagerDep) -> List[UserResponse]:
    return _public(user_manager.list_users())


@router.get("/search", response_model=List[UserResponse], summary="Search users")
def search_users(
    user_manager: UserManagerDep,
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
) -> List[UserResponse]:
    """Search username, first name, last name and email.

    Raises:
        HTTPException: 400 if the search term is blank.
    """
    if not search_term or not search_term.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search term is required",
        )
    return _public(user_manager.search_users(search_term.strip()))


@router.get("/username/{username}", response_model=UserResponse, summary="Get user by username")
def get_user_by_username(username: str, user_manager: UserManagerDep) -> UserResponse:
    user = user_manager.get_user_by_username(username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with username '{username}' not found",
        )
    return UserResponse.from_user(user)


@router.get("/role/{role}", response_model=List[UserResponse], summary="List users by role")
def list_users_by_role(role: str, user_manager: UserManagerDep) -> List[UserResponse]:
    parsed = UserRole.parse(role)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role: {role}. Must be one of: "
            + ", ".join(r.value for r in UserRole),
        )
    return _public(user_manager.list_users_by_role(parsed))


@router.get("/check-username/{username}", response_model=bool, summary="Is a username free")
def check_username(username: str, user_manager: UserManagerDep) -> bool:
    return user_manager.is_username_available(username)


@router.get("/check-email/{email}", response_model=bool, summary="Is an email free")
def check_email(email: str, user_manager: UserManagerDep) -> bool:
    return user_manager.is_email_available(email)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
def register_user(
    req: CreateUserRequest,
    response: Response,
    user_manager: UserManagerDep,
) -> UserResponse:
    """Create a user without signing in.

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
    response.headers["Location"] = f"{router.prefix}/{user.id}"
    return UserResponse.from_user(user)


@router.post("/login", response_model=UserResponse, summary="Check credentials")
def login_user(req: LoginRequest, user_manager: UserManagerDep) -> UserResponse:
    """Check credentials and return the user, without issuing a token.

    Raises:
        HTTPException: 401 if the credentials are wrong.
    """
    user = user_manager.authenticate(req.username_or_email, req.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username/email or password",
        )
    return UserResponse.from_user(user)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by id")
def get_user(user_id: str, user_manager: UserManagerDep) -> UserResponse:
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found",
        )
    return UserResponse.from_user(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(get_current_user_id)],
    summary="Update a user",
)
def update_user(
    user_id: str,
    req: UpdateUserRequest,
    user_manager: UserManagerDep,
) -> UserResponse:
    """Partially update a user.

    Raises:
        HTTPException: 400 on a taken username/email, 404 if not found.
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
            detail=f"User with ID {user_id} not found",
        )
    return UserResponse.from_user(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(get_current_user_id)],
    summary="Delete a user",
)
def delete_user(
    user_id: str,
    user_manager: UserManagerDep,
) -> Response:
    if not user_manager.delete_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
