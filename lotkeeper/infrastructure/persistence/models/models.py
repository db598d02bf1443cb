from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import declarative_base
from lotkeeper.shared.custom_types import UTCDateTime

Base = declarative_base()


class SlotRecord(Base):
    __tablename__ = "slots"

    label = Column(String, primary_key=True)
    position = Column(Integer, nullable=False, index=True)
    is_occupied = Column(Boolean, default=False, nullable=False)
    license_plate = Column(String, nullable=True)
    entry_time = Column(UTCDateTime, nullable=True)

    def to_dict(self):
        return {
            "label": self.label,
            "position": self.position,
            "is_occupied": self.is_occupied,
            "license_plate": self.license_plate,
            "entry_time": self.entry_time,
        }


class EarningsRecord(Base):
    __tablename__ = "earnings"

    name = Column(String, primary_key=True)  # total, weekly, monthly
    # Two fractional digits as text, SQLite has no decimal type
    amount = Column(String, nullable=False, default="0.00")
