from fastapi import APIRouter, Depends, status

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.flock import FlockRepository, get_flock_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.flock import FlockCreate, FlockResponse, FlockStats, FlockUpdate

router = APIRouter()


@router.get("/", response_model=Envelope[list[FlockResponse]])
async def list_flocks(flocks: FlockRepository = Depends(get_flock_repository)):
    rows = await flocks.list_all()
    return Envelope(
        data=[FlockResponse.model_validate(f) for f in rows],
        message="Flocks retrieved successfully",
    )


@router.get("/{flock_id}", response_model=Envelope[FlockResponse])
async def get_flock(flock_id: int, flocks: FlockRepository = Depends(get_flock_repository)):
    flock = await flocks.get(flock_id)
    if flock is None:
        raise NotFoundError("Flock")
    return Envelope(data=FlockResponse.model_validate(flock), message="Flock retrieved successfully")


@router.get("/{flock_id}/stats", response_model=Envelope[FlockStats])
async def get_flock_stats(flock_id: int, flocks: FlockRepository = Depends(get_flock_repository)):
    """Animal headcount and livestock expense total for one flock"""
    stats = await flocks.stats(flock_id)
    if stats is None:
        raise NotFoundError("Flock")
    return Envelope(data=stats, message="Flock statistics retrieved successfully")


@router.post("/", response_model=Envelope[FlockResponse], status_code=status.HTTP_201_CREATED)
async def create_flock(
    flock_data: FlockCreate,
    flocks: FlockRepository = Depends(get_flock_repository),
):
    flock = await flocks.create(flock_data.model_dump())
    return Envelope(data=FlockResponse.model_validate(flock), message="Flock created successfully")


@router.put("/{flock_id}", response_model=Envelope[FlockResponse])
async def update_flock(
    flock_id: int,
    flock_data: FlockUpdate,
    flocks: FlockRepository = Depends(get_flock_repository),
):
    flock = await flocks.update(flock_id, flock_data.model_dump(exclude_unset=True))
    if flock is None:
        raise NotFoundError("Flock")
    return Envelope(data=FlockResponse.model_validate(flock), message="Flock updated successfully")


@router.delete("/{flock_id}", response_model=Envelope[None])
async def delete_flock(flock_id: int, flocks: FlockRepository = Depends(get_flock_repository)):
    """Delete a flock; its animals stay on record without a flock"""
    if not await flocks.delete(flock_id):
        raise NotFoundError("Flock")
    return Envelope(message="Flock deleted successfully")
