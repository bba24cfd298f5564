from app.models.user import User
from app.models.store import Store
from app.models.product import Category, Product, ProductCategory
from app.models.photo import Photo, PhotoOwner, PhotoRole
from app.models.review import Review, Comment
from app.models.payment import Payment

__all__ = [
    "User",
    "Store",
    "Category",
    "Product",
    "ProductCategory",
    "Photo",
    "PhotoOwner",
    "PhotoRole",
    "Review",
    "Comment",
    "Payment",
]
