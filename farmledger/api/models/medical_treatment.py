from sqlalchemy import Column, String, Integer, Numeric, Date, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from farmledger.api.core.database import Base


class MedicalTreatment(Base):
    __tablename__ = "medical_treatments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    livestock_id = Column(Integer, ForeignKey("livestock.id", ondelete="CASCADE"), index=True)
    flock_id = Column(Integer, ForeignKey("flocks.id", ondelete="CASCADE"), index=True)
    treatment_type = Column(String(100), nullable=False)
    medication_name = Column(String(255))
    dosage = Column(String(100))
    administration_method = Column(String(100))
    treatment_date = Column(Date, nullable=False, index=True)
    next_treatment_date = Column(Date)
    veterinarian = Column(String(255))
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<MedicalTreatment {self.treatment_type}>"
