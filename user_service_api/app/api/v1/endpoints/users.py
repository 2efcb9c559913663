"""
User endpoints for API v1.

Bind HTTP verbs to ``UserService`` operations: ``POST /`` creates a
user, ``GET /{user_id}`` reads one, ``PATCH /{user_id}`` applies a
partial update and ``DELETE /{user_id}`` removes it.  Listing all
users is only exposed over the message channel (``get_users``).
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from user_service_api.app.api.deps import get_user_service, path_user_id
from user_service_api.app.core.errors import NotFoundError
from user_service_api.app.schemas.user import UserCreate, UserRead, UserUpdate
from user_service_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Create a new user and return the stored record."""
    return await service.create(user)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int = Depends(path_user_id),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Retrieve a single user by ID.

    Returns HTTP 404 if the user does not exist and HTTP 400 if the
    identifier is not numeric.
    """
    try:
        return await service.find_one(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_in: UserUpdate,
    user_id: int = Depends(path_user_id),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Update only the fields present in the request body."""
    try:
        return await service.update(user_id, user_in)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int = Depends(path_user_id),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user by ID."""
    try:
        await service.remove(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
