from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class Flock(Base):
    __tablename__ = "flocks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    breed = Column(String(100))
    description = Column(Text)
    purchase_date = Column(Date)
    total_purchase_cost = Column(Numeric(12, 2))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Flock {self.name}>"
