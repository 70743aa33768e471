"""Seed sample companies and products for demo purposes."""

from sqlalchemy.orm import Session
from catalog_admin.models.company import Company
from catalog_admin.models.product import Product


def seed_sample_data(db: Session) -> None:
    """Insert a few companies, each owning sample products."""
    sample_catalog = {
        "Acme Outdoor": [
            ("Trail Backpack 30L", "Hiking"),
            ("Ultralight Tent", "Camping"),
        ],
        "Northwind Audio": [
            ("Studio Headphones", "Audio"),
        ],
        "Blue Harbor Kitchen": [
            ("Cast Iron Skillet", "Cookware"),
            ("Chef Knife 8in", "Cutlery"),
        ],
    }

    created = 0
    for company_name, products in sample_catalog.items():
        company = db.query(Company).filter(Company.name == company_name).first()
        if not company:
            company = Company(name=company_name)
            db.add(company)
            db.flush()

        for product_name, category in products:
            exists = db.query(Product).filter(
                Product.name == product_name, Product.company_id == company.id
            ).first()
            if not exists:
                db.add(Product(
                    name=product_name,
                    description=f"{product_name} by {company_name}",
                    category=category,
                    company_id=company.id,
                ))
                created += 1

    db.commit()
    print(f"✅ Seeded {len(sample_catalog)} companies, {created} new products")
