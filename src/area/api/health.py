from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from area.models.schemas import HealthResponse
from area.storage.database import get_session
from area.storage import repository

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(session: AsyncSession = Depends(get_session)):
    hooks = await repository.get_hooks_count(session)
    reactions = await repository.get_reactions_count(session)
    return HealthResponse(hooks_total=hooks, reactions_total=reactions)
