from sqlalchemy import Column, Integer, String, DateTime, Enum, Index
from sqlalchemy.sql import func
import enum

from app.database import Base


class PhotoOwner(str, enum.Enum):
    """Kind of entity a photo belongs to."""
    PRODUCT = "product"
    STORE = "store"
    USER = "user"


class PhotoRole(str, enum.Enum):
    """What the photo is used for on its owner."""
    PRODUCT_IMAGE = "productImage"
    STORE_LOGO = "storeLogo"
    AVATAR = "avatar"


class Photo(Base):
    """
    Photo owned by exactly one product, store or user.

    Ownership is keyed by (owner_type, owner_id, role) instead of one
    nullable foreign key per owner kind, so every lookup is a single
    indexed query.

    Attributes:
        id: Unique identifier for the photo
        path: Resolved URL of the hosted image
        owner_type: Kind of owning entity
        owner_id: Identifier of the owning entity
        role: Role of the photo on its owner
        created_at: Timestamp when photo was attached
    """
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    path = Column(String(1024), nullable=False)
    owner_type = Column(
        Enum(PhotoOwner, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    owner_id = Column(Integer, nullable=False)
    role = Column(Enum(PhotoRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_photos_owner_role", "owner_type", "owner_id", "role"),
    )

    def __repr__(self):
        return f"<Photo(id={self.id}, owner={self.owner_type}:{self.owner_id}, role='{self.role}')>"
