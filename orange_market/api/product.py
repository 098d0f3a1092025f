# orange_market/api/product.py
from fastapi import APIRouter, Depends, Query, Request, status

from orange_market.core.auth import current_user
from orange_market.core.products import ProductPipeline, ProductRequest, ProductView
from orange_market.db.models import User

router = APIRouter(dependencies=[Depends(current_user)])


def get_pipeline(request: Request) -> ProductPipeline:
    return request.app.state.products


@router.get("", response_model=list[ProductView])
async def list_products(
    city: str = Query(..., min_length=1),
    pipeline: ProductPipeline = Depends(get_pipeline),
):
    return await pipeline.list_by_city(city)


@router.get("/{idx}", response_model=ProductView)
async def get_product(idx: int, pipeline: ProductPipeline = Depends(get_pipeline)):
    return await pipeline.get_one(idx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductRequest,
    user: User = Depends(current_user),
    pipeline: ProductPipeline = Depends(get_pipeline),
):
    idx = await pipeline.create(body, owner_idx=user.idx)
    return {"idx": idx}


@router.put("/{idx}")
async def update_product(
    idx: int,
    body: ProductRequest,
    user: User = Depends(current_user),
    pipeline: ProductPipeline = Depends(get_pipeline),
):
    await pipeline.update(idx, body, owner_idx=user.idx)
    return {"idx": idx}


@router.patch("/{idx}/sold")
async def toggle_sold(idx: int, pipeline: ProductPipeline = Depends(get_pipeline)):
    sold = await pipeline.toggle_sold(idx)
    return {"idx": idx, "sold": sold}


@router.delete("/{idx}")
async def delete_product(idx: int, pipeline: ProductPipeline = Depends(get_pipeline)):
    await pipeline.delete(idx)
    return {"idx": idx}
