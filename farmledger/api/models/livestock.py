from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class Livestock(Base):
    __tablename__ = "livestock"

    id = Column(Integer, primary_key=True, autoincrement=True)
    flock_id = Column(Integer, ForeignKey("flocks.id", ondelete="SET NULL"), index=True)
    tag_id = Column(String(100), unique=True, nullable=False)
    species = Column(String(100), nullable=False)
    breed = Column(String(100))
    gender = Column(String(20), nullable=False, default="unknown")
    date_of_birth = Column(Date)
    status = Column(String(20), nullable=False, default="active", index=True)
    purchase_price = Column(Numeric(12, 2))
    purchase_date = Column(Date)
    sale_price = Column(Numeric(12, 2))
    sale_date = Column(Date)
    sale_reason = Column(Text)
    weight_at_purchase = Column(Numeric(10, 2))
    current_weight = Column(Numeric(10, 2))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Livestock {self.tag_id}>"
