"""User Routes — REST surface over UserLifecycleService.

Invariants:
    - Routes contain no business logic: every decision is made by the service
    - AccountsError raised by the service reaches the global handler unchanged
    - Responses use UserResponse (no password_hash on the wire)

Design Decisions:
    - get_user_service builds the service per request from the request-scoped DB session;
      tests override it via app.dependency_overrides
    - /by-email registered before /{user_id} so the literal path wins
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.config import get_settings
from accounts.infrastructure.database import get_db
from accounts.infrastructure.password_hasher import BcryptPasswordHasher
from accounts.repositories.user_repository import SqlAlchemyUserRepository
from accounts.schemas.user import UserCreate, UserResponse, UserUpdate
from accounts.services.user_lifecycle import UserLifecycleService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_user_service(
    db: AsyncSession = Depends(get_db),
) -> UserLifecycleService:
    settings = get_settings()
    return UserLifecycleService(
        SqlAlchemyUserRepository(db),
        BcryptPasswordHasher(),
        work_factor=settings.password_hash_rounds,
        min_password_length=settings.password_min_length,
    )


@router.post(
    "", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Register a new user."""
    return await service.create(body.name, body.email, body.password)


@router.get("", response_model=list[UserResponse])
async def list_users(
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: UserLifecycleService = Depends(get_user_service),
):
    """List active users, optionally paginated."""
    return await service.find_all(limit=limit, offset=offset)


@router.get("/by-email", response_model=UserResponse | None)
async def get_user_by_email(
    email: str = Query(..., min_length=3, max_length=320),
    service: UserLifecycleService = Depends(get_user_service),
):
    """Look up an active user by email. Returns null when nobody holds it."""
    return await service.find_by_email(email)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Get an active user."""
    return await service.find_one(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Partially update an active user. Omitted fields are left unchanged."""
    return await service.update(user_id, body.to_changes())


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    service: UserLifecycleService = Depends(get_user_service),
):
    """Soft-delete an active user."""
    await service.remove(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
