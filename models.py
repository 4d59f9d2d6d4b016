from datetime import date, datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base


class Cafe(Base):
    __tablename__ = "cafes"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False, index=True)
    area = Column(String, nullable=True, index=True)
    neighbourhood = Column(String, nullable=True)
    postcode = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    website = Column(String, nullable=True)

    # "master" for the imported list, "user_added" otherwise
    source = Column(String, nullable=False, default="user_added")

    created_at = Column(DateTime, default=datetime.utcnow)

    visits = relationship(
        "Visit",
        back_populates="cafe",
        cascade="all, delete-orphan",
        order_by="Visit.id",
    )


class Visit(Base):
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, index=True)
    cafe_id = Column(Integer, ForeignKey("cafes.id"), nullable=False, index=True)

    visitor_name = Column(String, nullable=False, index=True)
    visit_date = Column(Date, nullable=False, default=date.today)

    # 1-5
    vibe_rating = Column(Integer, nullable=False)
    food_rating = Column(Integer, nullable=False)
    coffee_rating = Column(Integer, nullable=False)
    price_rating = Column(Integer, nullable=False)

    items_bought = Column(Text, nullable=True)
    recommendations = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    cafe = relationship("Cafe", back_populates="visits")
