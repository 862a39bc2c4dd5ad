from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from splitledger.db.session import Base
from splitledger.models.types import Amount

class SettlementHistory(Base):
    __tablename__ = "settlement_history"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    from_user = Column(String, nullable=False)
    to_user = Column(String, nullable=False)
    amount = Column(Amount, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
