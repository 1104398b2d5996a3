from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_identity_optional
from schemas import Identity, MeResponse
from services.identity_service import IdentityResolver

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/me", response_model=MeResponse)
async def me(identity: Optional[Identity] = Depends(get_current_identity_optional)):
    return MeResponse(identity=identity, signature=IdentityResolver.default_signature(identity))
