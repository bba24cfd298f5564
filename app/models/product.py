from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Numeric,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Category(Base):
    """Product category. Linked to products through ProductCategory."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

    product_links = relationship("ProductCategory", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class ProductCategory(Base):
    """Association between a product and one of its categories."""
    __tablename__ = "product_categories"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    product = relationship("Product", back_populates="category_links")
    category = relationship("Category", back_populates="product_links")

    def __repr__(self):
        return f"<ProductCategory(product_id={self.product_id}, category_id={self.category_id})>"


class Product(Base):
    """
    Product model representing items listed by a store.

    Attributes:
        id: Unique identifier for the product
        name: Product name
        description: Free-text description
        price: Product price (must be non-negative)
        size: Size label
        brand_name: Brand of the product
        quantity: Listed quantity (must be non-negative)
        store_id: Owning store
        created_at: Timestamp when product was created
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    size = Column(String(50), nullable=True)
    brand_name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    store = relationship("Store", back_populates="products")
    category_links = relationship(
        "ProductCategory", back_populates="product", cascade="all, delete-orphan"
    )
    reviews = relationship("Review", back_populates="product")

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("quantity >= 0", name="check_quantity_non_negative"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
