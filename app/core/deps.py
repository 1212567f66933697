from typing import Annotated
from uuid import UUID

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client
from supabase_auth import UserResponse

from app.core.supabase_client import get_supabase
from app.schemas.user import AppRole

security = HTTPBearer(
    scheme_name="Access Token",
)

Database = Annotated[Client, Depends(get_supabase)]


class CurrentUser(BaseModel):
    id: UUID
    email: str


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Database,
) -> CurrentUser:
    token = credentials.credentials

    try:
        user_response: UserResponse = db.auth.get_user(token)

        if not user_response or not user_response.user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        return CurrentUser(
            id=UUID(user_response.user.id), email=user_response.user.email
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]


def _check_role(db: Client, user_id: UUID, role: AppRole) -> None:
    try:
        result = (
            db.table("users")
            .select("role")
            .eq("id", str(user_id))
            .maybe_single()
            .execute()
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to verify {role.value.lower()} status: {str(e)}",
        )

    user_data = (result.data if result else None) or {}
    if user_data.get("role") != role.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only {role.value.lower()}s can perform this action",
        )


async def get_admin_user(user: AuthenticatedUser, db: Database) -> CurrentUser:
    _check_role(db, user.id, AppRole.ADMIN)
    return user


async def get_mentor_user(user: AuthenticatedUser, db: Database) -> CurrentUser:
    _check_role(db, user.id, AppRole.MENTOR)
    return user


AdminUser = Annotated[CurrentUser, Depends(get_admin_user)]
MentorUser = Annotated[CurrentUser, Depends(get_mentor_user)]
