"""Catalog API router — products and companies, filtered by company scope."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from catalog_admin.core.security import (
    Actor, require_manage_brands, require_manage_products, require_view_products,
)
from catalog_admin.db.session import get_db
from catalog_admin.schemas.schemas import (
    CompanyCreate, CompanyOut, MessageResponse, ProductCreate, ProductOut, ProductUpdate,
)
from catalog_admin.services.product_service import product_service

router = APIRouter(prefix="/admin", tags=["catalog"])


@router.get("/products", response_model=List[ProductOut])
async def list_products(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_view_products),
):
    """Products owned by companies in the caller's scope."""
    return product_service.list_products(db, actor)


@router.get("/products/{product_id}", response_model=ProductOut)
async def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_view_products),
):
    return product_service.get_product(db, actor, product_id)


@router.post("/products", response_model=ProductOut, status_code=201)
async def create_product(
    body: ProductCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_products),
):
    return product_service.create_product(db, actor, body.model_dump())


@router.patch("/products/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_products),
):
    return product_service.update_product(db, actor, product_id, body.model_dump(exclude_unset=True))


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_products),
):
    product_service.delete_product(db, actor, product_id)
    return MessageResponse(message="Product deleted")


@router.get("/companies", response_model=List[CompanyOut])
async def list_companies(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_view_products),
):
    return product_service.list_companies(db, actor)


@router.post("/companies", response_model=CompanyOut, status_code=201)
async def create_company(
    body: CompanyCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manage_brands),
):
    return product_service.create_company(db, body.name)
