import logging
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stockroom.config import ROLE_SHOPKEEPER
from stockroom.database import get_db
from stockroom.exceptions import AppError, ServerError
from stockroom.schemas import ProductPayload, ProductRead
from stockroom.services.product_service import ProductService
from stockroom.utils.session_auth import SessionContext, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

require_shopkeeper = require_role(ROLE_SHOPKEEPER)

# Product endpoints report errors as {"status": "error", "message": ...}
_ERROR_STATUS = {"status": "error"}


def _with_status(e: AppError) -> AppError:
    e.extra.update(_ERROR_STATUS)
    return e


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
    """Inventory listing with summary statistics"""
    products = ProductService.list_products(db)
    return {
        "status": "success",
        "inventory": [ProductRead.model_validate(p).model_dump() for p in products],
        "stats": ProductService.compute_stats(products),
    }


@router.post("")
def create_product(data: ProductPayload, ctx: SessionContext = Depends(require_shopkeeper), db: Session = Depends(get_db)):
    """Add a product"""
    try:
        ProductService.create_product(db, data.model_dump())
    except AppError as e:
        raise _with_status(e)
    except Exception as e:
        db.rollback()
        logger.exception("POST /api/products failed: %s", e)
        raise ServerError("Failed to add product", extra=dict(_ERROR_STATUS))
    return {"status": "success", "message": "Product added successfully"}


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductPayload,
    ctx: SessionContext = Depends(require_shopkeeper),
    db: Session = Depends(get_db),
):
    """Replace a product's fields"""
    try:
        ProductService.update_product(db, product_id, data.model_dump())
    except AppError as e:
        raise _with_status(e)
    except Exception as e:
        db.rollback()
        logger.exception("PUT /api/products/%s failed: %s", product_id, e)
        raise ServerError("Failed to update product", extra=dict(_ERROR_STATUS))
    return {"status": "success", "message": "Product updated successfully"}


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, ctx: SessionContext = Depends(require_shopkeeper), db: Session = Depends(get_db)):
    """Remove a product"""
    try:
        ProductService.delete_product(db, product_id)
    except AppError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("DELETE /api/products/%s failed: %s", product_id, e)
        raise ServerError("Failed to delete product")
    return Response(status_code=204)
