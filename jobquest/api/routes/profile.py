"""
Profile editing: optional avatar upload, then display name and photo URL.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from jobquest.core.auth_dependency import get_auth_context
from jobquest.core.errors import IdentityProviderError, ImageHostingError
from jobquest.core.gating import require_user
from jobquest.schemas.auth import UserState
from jobquest.services.auth_context import AuthContext
from jobquest.services.image_hosting import upload_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profile"])


@router.post("/profile", response_model=UserState)
def save_profile(
    display_name: str = Form(...),
    avatar: Optional[UploadFile] = File(None),
    user: UserState = Depends(require_user),
    ctx: AuthContext = Depends(get_auth_context),
):
    if not display_name.strip():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Display name is required.")

    photo_url = user.photo_url or ""
    if avatar is not None and avatar.filename:
        try:
            photo_url = upload_image(avatar.file.read(), f"{user.uid}-{avatar.filename}")
        except ImageHostingError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    try:
        return ctx.update_profile(display_name=display_name.strip(), photo_url=photo_url or None)
    except IdentityProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
