# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Signup/login is handled by Supabase Auth client-side. These routes let a
# client check its token and delete its own account.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from app.dependencies import StoreDep
from app.exceptions import ConfirmationRequiredError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }


@router.delete("/account")
async def delete_account(
    store: StoreDep,
    confirm: Annotated[bool, Query(description="Must be true")] = False,
    user: AuthUser = Depends(get_current_user),
) -> dict:
    """
    Permanently delete the current account.

    All of the account's songs and its prompter settings are removed with
    it (ON DELETE CASCADE).
    """
    if not confirm:
        raise ConfirmationRequiredError("delete the account", ["confirm"])

    store.delete_account(user.id)
    logger.info(f"Account deleted by its owner: {user.id}")

    return {
        "user_id": str(user.id),
        "message": "Account deleted",
    }
