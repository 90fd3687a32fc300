from stockroom.models.user import User
from stockroom.models.product import Product

__all__ = ["User", "Product"]
