from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from config import VISITORS


# ------------------
# Cafés
# ------------------

class CafeBase(BaseModel):
    name: str
    area: Optional[str] = None
    neighbourhood: Optional[str] = None
    postcode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    website: Optional[str] = None


class CafeCreate(CafeBase):
    name: str = Field(min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    source: str = "user_added"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Café name is required")
        return v

    # empty strings from forms are stored as NULL
    @field_validator("area", "neighbourhood", "postcode", "website")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class CafeOut(CafeBase):
    id: int
    source: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ------------------
# Visits
# ------------------

class VisitCreate(BaseModel):
    cafe_id: int
    visitor_name: str
    visit_date: Optional[date] = None

    vibe_rating: int = Field(ge=1, le=5)
    food_rating: int = Field(ge=1, le=5)
    coffee_rating: int = Field(ge=1, le=5)
    price_rating: int = Field(ge=1, le=5)

    items_bought: Optional[str] = None
    recommendations: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("visitor_name")
    @classmethod
    def known_visitor(cls, v: str) -> str:
        if v not in VISITORS:
            raise ValueError(f"visitor_name must be one of {', '.join(VISITORS)}")
        return v


class VisitUpdate(BaseModel):
    vibe_rating: Optional[int] = Field(default=None, ge=1, le=5)
    food_rating: Optional[int] = Field(default=None, ge=1, le=5)
    coffee_rating: Optional[int] = Field(default=None, ge=1, le=5)
    price_rating: Optional[int] = Field(default=None, ge=1, le=5)

    items_bought: Optional[str] = None
    recommendations: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("vibe_rating", "food_rating", "coffee_rating", "price_rating")
    @classmethod
    def rating_not_null(cls, v: Optional[int]) -> int:
        # omit the field to keep the current rating
        if v is None:
            raise ValueError("Ratings must be between 1 and 5")
        return v


class VisitOut(BaseModel):
    id: int
    cafe_id: int
    visitor_name: str
    visit_date: date

    vibe_rating: int
    food_rating: int
    coffee_rating: int
    price_rating: int

    items_bought: Optional[str] = None
    recommendations: Optional[str] = None
    notes: Optional[str] = None

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VisitWithCafe(VisitOut):
    cafe: CafeOut


# ------------------
# Aggregates
# ------------------

class CafeAggregates(BaseModel):
    avg_rating: float = 0
    avg_vibe: float = 0
    avg_food: float = 0
    avg_coffee: float = 0
    avg_price: float = 0
    total_visits: int = 0
    unique_visitors: List[str] = []
    visitor_counts: Dict[str, int] = {}
    last_visit: Optional[date] = None


class CafeWithStats(CafeOut, CafeAggregates):
    pass


class Recommendation(BaseModel):
    visitor: str
    text: str


class CafeDetail(CafeWithStats):
    visits: List[VisitOut] = []
    all_recommendations: List[Recommendation] = []


class NearbyCafe(CafeOut):
    distance_km: float


class MapMarker(BaseModel):
    id: int
    name: str
    latitude: float
    longitude: float
    color: str
    badge: str = ""


# ------------------
# /stats
# ------------------

class LeaderboardEntry(BaseModel):
    name: str
    total_visits: int
    unique_cafes: int


class TopCafe(BaseModel):
    id: Optional[int] = None
    name: str
    area: Optional[str] = None
    avg_rating: float
    total_visits: int


class AreaStat(BaseModel):
    area: str
    total: int
    visited: int
    remaining: int
    percent_complete: float


class Overview(BaseModel):
    total_cafes: int = 0
    total_visited: int = 0
    total_remaining: int = 0
    percent_complete: float = 0


class SiteStats(BaseModel):
    overview: Overview
    leaderboard: List[LeaderboardEntry] = []
    top_cafes: List[TopCafe] = []
    area_stats: List[AreaStat] = []
