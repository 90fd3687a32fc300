from typing import Iterable, List
from sqlalchemy.orm import Session

from stockroom.config import LOW_STOCK_THRESHOLD
from stockroom.exceptions import NotFound, ValidationError
from stockroom.models.product import Product

PRODUCT_FIELDS = ("name", "sku", "category", "stock", "price", "reorder_level")


class ProductService:
    """Product catalog operations."""

    @staticmethod
    def list_products(db: Session) -> List[Product]:
        return db.query(Product).order_by(Product.id).all()

    @staticmethod
    def compute_stats(products: Iterable[Product]) -> dict:
        """Dashboard aggregates over a product list."""
        total = 0
        low_stock = 0
        total_value = 0.0
        categories = set()
        for p in products:
            total += 1
            stock = p.stock or 0
            if stock <= LOW_STOCK_THRESHOLD:
                low_stock += 1
            total_value += stock * (p.price or 0)
            categories.add(p.category)
        return {
            "totalProducts": total,
            "lowStockItems": low_stock,
            "totalValue": total_value,
            "totalCategories": len(categories),
        }

    @staticmethod
    def validate(data: dict) -> None:
        if any(not data.get(f) for f in ("name", "sku", "category")):
            raise ValidationError("All fields are required")
        if data.get("stock") is None or data.get("price") is None:
            raise ValidationError("All fields are required")

    @staticmethod
    def create_product(db: Session, data: dict) -> Product:
        ProductService.validate(data)
        product = Product(**{f: data.get(f) for f in PRODUCT_FIELDS})
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, data: dict) -> None:
        """Replace every product field."""
        ProductService.validate(data)
        values = {getattr(Product, f): data.get(f) for f in PRODUCT_FIELDS}
        updated = db.query(Product).filter(Product.id == product_id).update(values, synchronize_session=False)
        if updated == 0:
            db.rollback()
            raise NotFound("Product not found")
        db.commit()

    @staticmethod
    def delete_product(db: Session, product_id: int) -> None:
        deleted = db.query(Product).filter(Product.id == product_id).delete(synchronize_session=False)
        if deleted == 0:
            db.rollback()
            raise NotFound("Product not found")
        db.commit()
