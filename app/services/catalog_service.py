from typing import List, Optional

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import ProductNotFound
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.cart_service import CartService

logger = structlog.get_logger()


class CatalogService:

    @staticmethod
    def list_products(
        db: Session,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Product]:
        query = db.query(Product)

        if search:
            search_term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Product.name.ilike(search_term),
                    Product.description.ilike(search_term),
                )
            )

        if category:
            query = query.filter(Product.category.ilike(category.strip()))

        return query.order_by(Product.id).all()

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFound()
        return product

    @staticmethod
    def create_product(db: Session, product_in: ProductCreate) -> Product:
        product = Product(**product_in.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)
        logger.info("product_created", product_id=product.id, name=product.name)
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, product_in: ProductUpdate) -> Product:
        """Partial update. Prices already captured in carts and orders are unaffected."""
        product = CatalogService.get_product(db, product_id)

        for field, value in product_in.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(product, field, value)

        db.commit()
        db.refresh(product)
        logger.info("product_updated", product_id=product.id)
        return product

    @staticmethod
    def delete_product(db: Session, product_id: int) -> None:
        """Delete a product and pull it out of open carts. Placed orders keep their snapshot."""
        product = CatalogService.get_product(db, product_id)
        try:
            affected_carts = CartService.drop_product(db, product.id)
            db.delete(product)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("product_deleted", product_id=product_id, affected_carts=affected_carts)

    @staticmethod
    def serialize(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "image": product.image,
            "category": product.category,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
        }
