from sqlalchemy import Column, Integer, Numeric, DateTime
from sqlalchemy.sql import func

from app.database import Base


class Payment(Base):
    """
    Payment record from the append-only payment ledger.

    ``product_id`` carries no foreign key: ledger rows outlive the
    products they reference, so readers must expect dangling ids.

    Attributes:
        id: Unique identifier for the payment
        product_id: Purchased product
        user_id: Purchaser
        amount: Charged amount
        created_at: Timestamp when payment was recorded
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=True)
    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Payment(id={self.id}, product_id={self.product_id}, amount={self.amount})>"
