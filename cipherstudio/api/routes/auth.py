"""Auth API routes"""

from fastapi import APIRouter, Depends

from cipherstudio.api.dependencies import drop_workspace, get_session, get_supabase_repo
from cipherstudio.models.schemas import SignOutResponse
from cipherstudio.services.session import SessionContext

router = APIRouter()


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out(ctx: SessionContext = Depends(get_session)):
    """End the caller's session and release their workspace"""
    dropped = drop_workspace(ctx.user_id)
    await get_supabase_repo().sign_out(ctx.access_token)
    return SignOutResponse(signed_out=True, workspace_dropped=dropped)
