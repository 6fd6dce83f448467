from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.livestock import LivestockRepository, get_livestock_repository
from farmledger.api.repositories.sale import SaleRepository, get_sale_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.livestock import (
    LivestockCreate,
    LivestockResponse,
    LivestockSaleRequest,
    LivestockStatus,
    LivestockUpdate,
    WeightUpdate,
)
from farmledger.api.schemas.sale import SaleCreate, SaleResponse

router = APIRouter()


@router.get("/", response_model=Envelope[list[LivestockResponse]])
async def list_livestock(
    status_filter: Optional[LivestockStatus] = Query(None, alias="status"),
    flock_id: Optional[int] = Query(None, alias="flockId"),
    q: Optional[str] = Query(None, max_length=100),
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    """
    List animals

    Filters:
    - status: active, sold, deceased or transferred
    - flockId: only animals in this flock
    - q: search in tag, species and breed
    """
    rows = await livestock.list_all(status=status_filter, flock_id=flock_id, q=q)
    return Envelope(
        data=[LivestockResponse.model_validate(a) for a in rows],
        message="Livestock retrieved successfully",
    )


@router.get("/{animal_id}", response_model=Envelope[LivestockResponse])
async def get_animal(
    animal_id: int,
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    animal = await livestock.get(animal_id)
    if animal is None:
        raise NotFoundError("Livestock")
    return Envelope(
        data=LivestockResponse.model_validate(animal),
        message="Livestock retrieved successfully",
    )


@router.post("/", response_model=Envelope[LivestockResponse], status_code=status.HTTP_201_CREATED)
async def create_animal(
    animal_data: LivestockCreate,
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    """Register an animal; tag_id must be unique"""
    animal = await livestock.create(animal_data.model_dump())
    return Envelope(
        data=LivestockResponse.model_validate(animal),
        message="Livestock created successfully",
    )


@router.put("/{animal_id}", response_model=Envelope[LivestockResponse])
async def update_animal(
    animal_id: int,
    animal_data: LivestockUpdate,
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    animal = await livestock.update(animal_id, animal_data.model_dump(exclude_unset=True))
    if animal is None:
        raise NotFoundError("Livestock")
    return Envelope(
        data=LivestockResponse.model_validate(animal),
        message="Livestock updated successfully",
    )


@router.delete("/{animal_id}", response_model=Envelope[None])
async def delete_animal(
    animal_id: int,
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    if not await livestock.delete(animal_id):
        raise NotFoundError("Livestock")
    return Envelope(message="Livestock deleted successfully")


@router.post("/{animal_id}/sale", response_model=Envelope[SaleResponse], status_code=status.HTTP_201_CREATED)
async def sell_animal(
    animal_id: int,
    sale_data: LivestockSaleRequest,
    livestock: LivestockRepository = Depends(get_livestock_repository),
    sales: SaleRepository = Depends(get_sale_repository),
):
    """
    Sell one animal

    Writes an animal sale to the sales ledger and marks the animal sold in
    the same transaction.
    """
    animal = await livestock.get(animal_id)
    if animal is None:
        raise NotFoundError("Livestock")

    sale = await sales.record(
        SaleCreate(
            sale_type="animal",
            livestock_id=animal_id,
            flock_id=animal.flock_id,
            sale_date=sale_data.sale_date,
            description=f"Sale of {animal.species} {animal.tag_id}",
            quantity=1,
            unit_price=sale_data.sale_price,
            customer_name=sale_data.customer_name,
            customer_contact=sale_data.customer_contact,
            payment_method=sale_data.payment_method,
            notes=sale_data.notes,
        ),
        sale_reason=sale_data.sale_reason,
    )
    return Envelope(data=SaleResponse.model_validate(sale), message="Livestock sold successfully")


@router.patch("/{animal_id}/weight", response_model=Envelope[LivestockResponse])
async def update_weight(
    animal_id: int,
    weight_data: WeightUpdate,
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    animal = await livestock.update_weight(animal_id, weight_data.current_weight)
    if animal is None:
        raise NotFoundError("Livestock")
    return Envelope(
        data=LivestockResponse.model_validate(animal),
        message="Weight updated successfully",
    )


@router.get("/{animal_id}/financials", response_model=Envelope[dict])
async def get_animal_financials(
    animal_id: int,
    livestock: LivestockRepository = Depends(get_livestock_repository),
):
    """Purchase, sale, expense and medical totals with net and ROI for one animal"""
    financials = await livestock.financials(animal_id)
    if financials is None:
        raise NotFoundError("Livestock")
    return Envelope(data=financials, message="Livestock financials retrieved successfully")
