from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class Crop(Base):
    __tablename__ = "crops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    variety = Column(String(100))
    planting_date = Column(Date, nullable=False, index=True)
    expected_harvest_date = Column(Date)
    actual_harvest_date = Column(Date)
    area = Column(Numeric(10, 2), nullable=False, default=0)
    area_unit = Column(String(20), nullable=False, default="ACRES")
    expected_yield = Column(Numeric(10, 2), nullable=False, default=0)
    actual_yield = Column(Numeric(10, 2))
    yield_unit = Column(String(20), default="KILOGRAMS")
    market_price = Column(Numeric(10, 2), nullable=False, default=0)
    # Cached SUM(expenses.amount); maintained by ExpenseRepository
    total_expenses = Column(Numeric(12, 2), nullable=False, default=0, server_default="0")
    status = Column(String(50), nullable=False, default="PLANNED", index=True)
    field_location = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Crop {self.name}>"
