"""Machine routes for fitcore."""

import asyncio

from fastapi import APIRouter, Depends

from fitcore.api.dependencies import get_repositories
from fitcore.core.errors import APIError, ErrorCode
from fitcore.infrastructure.database import Repositories
from fitcore.models import Machine

router = APIRouter(prefix="/v1/machines", tags=["Machines"])


@router.get("/{machine_id}", response_model=Machine)
async def get_machine(machine_id: str, repos: Repositories = Depends(get_repositories)):
    """Machine details."""
    machine = await asyncio.to_thread(repos.machines.get, machine_id)
    if machine is None:
        raise APIError(404, ErrorCode.NOT_FOUND, "machine not found")
    return machine
