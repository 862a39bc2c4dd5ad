from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from splitledger.db.session import Base

class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    owner = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    members = relationship(
        "GroupMember",
        back_populates="group",
        order_by="GroupMember.id",
        cascade="all, delete"
    )
