from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.catalog_service import CatalogService
from app.utils.response import success

router = APIRouter()


@router.get("", response_model=dict)
def get_cakes(
    search: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    """List cakes, optionally filtered by text search and category"""
    products = CatalogService.list_products(db, search=search, category=category)
    return success(
        data=[CatalogService.serialize(product) for product in products],
        message="Cakes retrieved",
    )


@router.get("/{cake_id}", response_model=dict)
def get_cake(cake_id: int, db: Session = Depends(get_db)):
    product = CatalogService.get_product(db, cake_id)
    return success(data=CatalogService.serialize(product), message="Cake retrieved")
