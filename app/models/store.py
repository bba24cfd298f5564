from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Store(Base):
    """
    Store that owns products.

    The location is kept as flat columns and exposed as a structured
    object by the response schemas. The logo is the store's photo with
    the ``storeLogo`` role.
    """
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    city = Column(String(120), nullable=True)
    country = Column(String(120), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    products = relationship("Product", back_populates="store")

    def __repr__(self):
        return f"<Store(id={self.id}, name='{self.name}')>"
