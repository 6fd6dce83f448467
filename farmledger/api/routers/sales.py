from datetime import date
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from farmledger.api.core.errors import NotFoundError
from farmledger.api.repositories.sale import SaleRepository, get_sale_repository
from farmledger.api.schemas.common import Envelope
from farmledger.api.schemas.sale import SaleCreate, SaleResponse, SaleType

router = APIRouter()


@router.post("/", response_model=Envelope[SaleResponse], status_code=status.HTTP_201_CREATED)
async def record_sale(
    sale_data: SaleCreate,
    sales: SaleRepository = Depends(get_sale_repository),
):
    """
    Record a sale

    An animal sale marks the animal sold in the same transaction; if the
    animal is missing nothing is written.
    """
    sale = await sales.record(sale_data)
    return Envelope(data=SaleResponse.model_validate(sale), message="Sale recorded successfully")


@router.get("/", response_model=Envelope[list[dict]])
async def list_sales(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    sale_type: Optional[SaleType] = Query(None, alias="saleType"),
    sales: SaleRepository = Depends(get_sale_repository),
):
    rows = await sales.list_all(start_date=start_date, end_date=end_date, sale_type=sale_type)
    return Envelope(data=rows, message="Sales retrieved successfully")


@router.get("/summary", response_model=Envelope[dict])
async def sales_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    sales: SaleRepository = Depends(get_sale_repository),
):
    return Envelope(
        data=await sales.summary(start_date, end_date),
        message="Sales summary retrieved successfully",
    )


@router.delete("/{sale_id}", response_model=Envelope[None])
async def delete_sale(sale_id: int, sales: SaleRepository = Depends(get_sale_repository)):
    """Delete a sale; an animal sale puts the animal back to active"""
    if not await sales.delete(sale_id):
        raise NotFoundError("Sale")
    return Envelope(message="Sale deleted successfully")
