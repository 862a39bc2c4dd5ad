from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from splitledger.db.session import Base
from splitledger.models.types import Amount

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    description = Column(String, nullable=False, default="")
    amount = Column(Amount, nullable=False)
    paid_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    splits = relationship(
        "ExpenseSplit",
        order_by="ExpenseSplit.id",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
