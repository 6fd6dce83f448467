from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class LivestockExpense(Base):
    __tablename__ = "livestock_expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    flock_id = Column(Integer, ForeignKey("flocks.id", ondelete="CASCADE"), index=True)
    livestock_id = Column(Integer, ForeignKey("livestock.id", ondelete="SET NULL"), index=True)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<LivestockExpense {self.category} {self.amount}>"
