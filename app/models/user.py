from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.database import Base


class User(Base):
    """Review and comment author. Accounts are managed by the auth service."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def display_name(self):
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or None

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
