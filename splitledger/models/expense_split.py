from sqlalchemy import Column, ForeignKey, Integer, String
from splitledger.db.session import Base
from splitledger.models.types import Amount

class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False)
    member = Column(String, nullable=False)
    amount = Column(Amount, nullable=False)
