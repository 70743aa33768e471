"""Catalog service — products and companies, restricted to the actor's company scope."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from catalog_admin.core.authorization import is_in_scope
from catalog_admin.core.exceptions import (
    OutOfScopeError, ResourceConflictError, ResourceNotFoundError, ValidationError,
)
from catalog_admin.core.security import Actor
from catalog_admin.models.company import Company
from catalog_admin.models.product import Product

logger = logging.getLogger("catalog_admin.catalog")

REQUIRED_PRODUCT_FIELDS = ("name", "is_active")


class ProductService:
    """Scoped CRUD over catalog products and the companies that own them."""

    @staticmethod
    def list_products(db: Session, actor: Actor) -> List[Product]:
        products = db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
        return [p for p in products if is_in_scope(actor.company_ids, p.company_id)]

    @staticmethod
    def _get(db: Session, product_id: int) -> Product:
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ResourceNotFoundError(f"Product {product_id} not found")
        return product

    @staticmethod
    def get_product(db: Session, actor: Actor, product_id: int) -> Product:
        """Out-of-scope products are reported as missing."""
        product = ProductService._get(db, product_id)
        if not is_in_scope(actor.company_ids, product.company_id):
            raise ResourceNotFoundError(f"Product {product_id} not found")
        return product

    @staticmethod
    def _check_company(db: Session, company_id) -> None:
        if company_id is None:
            return
        if not db.query(Company).filter(Company.id == company_id).first():
            raise ResourceNotFoundError(f"Company {company_id} not found")

    @staticmethod
    def create_product(db: Session, actor: Actor, data: Dict[str, Any]) -> Product:
        company_id = data.get("company_id")
        if not is_in_scope(actor.company_ids, company_id):
            raise OutOfScopeError("You can only create products for your assigned companies")
        ProductService._check_company(db, company_id)

        product = Product(**data)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, actor: Actor, product_id: int, updates: Dict[str, Any]) -> Product:
        nulled = sorted(k for k in REQUIRED_PRODUCT_FIELDS if k in updates and updates[k] is None)
        if nulled:
            raise ValidationError(f"Field(s) cannot be null: {', '.join(nulled)}")
        product = ProductService._get(db, product_id)
        if not is_in_scope(actor.company_ids, product.company_id):
            raise OutOfScopeError("You can only edit products from your assigned companies")
        if "company_id" in updates:
            if not is_in_scope(actor.company_ids, updates["company_id"]):
                raise OutOfScopeError("You can only move products to your assigned companies")
            ProductService._check_company(db, updates["company_id"])

        for key, value in updates.items():
            setattr(product, key, value)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, actor: Actor, product_id: int) -> None:
        product = ProductService._get(db, product_id)
        if not is_in_scope(actor.company_ids, product.company_id):
            raise OutOfScopeError("You can only delete products from your assigned companies")
        db.delete(product)
        db.commit()

    @staticmethod
    def list_companies(db: Session, actor: Actor) -> List[Company]:
        companies = db.query(Company).order_by(Company.name).all()
        return [c for c in companies if is_in_scope(actor.company_ids, c.id)]

    @staticmethod
    def create_company(db: Session, name: str) -> Company:
        if db.query(Company).filter(Company.name == name).first():
            raise ResourceConflictError(f"Company '{name}' already exists")
        company = Company(name=name)
        db.add(company)
        db.commit()
        db.refresh(company)
        logger.info("Created company %s", name)
        return company


product_service = ProductService()
