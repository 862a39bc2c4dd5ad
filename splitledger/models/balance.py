from sqlalchemy import Column, ForeignKey, Integer, String
from splitledger.db.session import Base
from splitledger.models.types import Amount

class Balance(Base):
    __tablename__ = "balances"

    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String, primary_key=True)
    amount = Column(Amount, nullable=False, default=0)
