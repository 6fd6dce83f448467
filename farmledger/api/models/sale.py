from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    livestock_id = Column(Integer, ForeignKey("livestock.id", ondelete="SET NULL"), index=True)
    flock_id = Column(Integer, ForeignKey("flocks.id", ondelete="SET NULL"), index=True)
    sale_type = Column(String(20), nullable=False)
    sale_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False)
    customer_name = Column(String(255))
    customer_contact = Column(String(255))
    payment_method = Column(String(50), nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Sale {self.sale_type} {self.total_amount}>"
