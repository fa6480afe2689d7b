from sqlalchemy import Column, Float, Integer, Text
from volunteer_hub.database import Base


class ZipcodeCoordinate(Base):
    __tablename__ = "zipcode_coordinates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    zipcode = Column(Text, nullable=False, unique=True)
    city = Column(Text)
    state = Column(Text)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    county = Column(Text)
    timezone = Column(Text)
