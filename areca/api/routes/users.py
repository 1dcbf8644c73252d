from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from areca.core.auth import CurrentUser, DbSession
from areca.core.file_validation import read_avatar_upload
from areca.core.rate_limit import rate_limit
from areca.schemas.common import MessageResponse
from areca.schemas.user import (
    AvatarResponse,
    ChangePasswordRequest,
    DeleteAccountRequest,
    ProfileUpdate,
    UserMessageResponse,
    UserOut,
    UserResponse,
)
from areca.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["User"])


@router.get("/profile", response_model=UserResponse)
def get_profile(user: CurrentUser) -> UserResponse:
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/profile", response_model=UserMessageResponse)
def update_profile(payload: ProfileUpdate, user: CurrentUser, db: DbSession) -> UserMessageResponse:
    updated = UserService(db, user).update_profile(payload)
    return UserMessageResponse(message="Profile updated successfully", user=UserOut.model_validate(updated))


@router.post(
    "/change-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth"))],
)
def change_password(payload: ChangePasswordRequest, user: CurrentUser, db: DbSession) -> MessageResponse:
    """Change the password; every session of the user is revoked, this one included.

    Raises:
        ValidationAppError: 400 ``invalid_password`` when the current password is wrong.
    """
    UserService(db, user).change_password(payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post(
    "/delete-account",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("auth"))],
)
def delete_account(payload: DeleteAccountRequest, user: CurrentUser, db: DbSession) -> MessageResponse:
    UserService(db, user).delete_account(payload.password)
    return MessageResponse(message="Account deleted successfully")


@router.post(
    "/avatar",
    response_model=AvatarResponse,
    dependencies=[Depends(rate_limit("upload"))],
)
async def upload_avatar(
    user: CurrentUser,
    db: DbSession,
    file: UploadFile = File(..., description="JPEG, PNG, GIF or WEBP image"),
) -> AvatarResponse:
    """Replace the user's avatar.

    The upload is size-limited and its magic number must match the declared
    image type.

    Raises:
        ValidationAppError: 400 for unsupported or spoofed files.
        PayloadTooLargeAppError: 413 when the file exceeds the size limit.
    """
    content, image_type = await read_avatar_upload(file)
    updated = await run_in_threadpool(UserService(db, user).set_avatar, content, image_type)
    return AvatarResponse(
        message="Avatar updated successfully",
        user=UserOut.model_validate(updated),
        avatar=updated.avatar,
    )


@router.delete(
    "/avatar",
    response_model=UserMessageResponse,
    dependencies=[Depends(rate_limit("upload"))],
)
def delete_avatar(user: CurrentUser, db: DbSession) -> UserMessageResponse:
    updated = UserService(db, user).remove_avatar()
    return UserMessageResponse(message="Avatar removed successfully", user=UserOut.model_validate(updated))
