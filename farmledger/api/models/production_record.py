from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class ProductionRecord(Base):
    __tablename__ = "production_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    flock_id = Column(Integer, ForeignKey("flocks.id", ondelete="CASCADE"), nullable=False, index=True)
    livestock_id = Column(Integer, ForeignKey("livestock.id", ondelete="SET NULL"), index=True)
    product_type = Column(String(20), nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False)
    unit = Column(String(20), nullable=False)
    record_date = Column(Date, nullable=False, index=True)
    quality_notes = Column(Text)
    sale_price = Column(Numeric(12, 2))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ProductionRecord {self.product_type} {self.quantity}>"
