import logging
from datetime import date
from typing import Literal, Optional

from fastapi import FastAPI, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from config import LOG_LEVEL, NEAREST_LIMIT, VISITORS
from database import Base, engine, get_db
from geo import nearest
from models import Cafe, Visit
from schemas import (
    CafeCreate, CafeOut, CafeWithStats, CafeDetail, NearbyCafe, MapMarker,
    VisitCreate, VisitUpdate, VisitOut, VisitWithCafe,
    SiteStats,
)
from search import suggest
from stats import cafe_aggregates, recommendations, site_stats, with_stats
from views import MAP_SEARCH_FIELDS, CafeListView, areas, map_markers

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Café Tracker", version="0.1.0")

# DB init
Base.metadata.create_all(bind=engine)


def store_failure(db: Session, action: str) -> HTTPException:
    """Log the current DB error, roll back, and build the client-facing error."""
    logger.exception("Error trying to %s", action)
    db.rollback()
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def all_cafes(db: Session):
    return db.query(Cafe).options(selectinload(Cafe.visits)).order_by(Cafe.id).all()


def get_cafe_or_404(cafe_id: int, db: Session) -> Cafe:
    cafe = db.query(Cafe).filter(Cafe.id == cafe_id).first()
    if not cafe:
        raise HTTPException(status_code=404, detail="Cafe not found")
    return cafe


def get_visit_or_404(visit_id: int, db: Session) -> Visit:
    visit = db.query(Visit).filter(Visit.id == visit_id).first()
    if not visit:
        raise HTTPException(status_code=404, detail="Visit not found")
    return visit


@app.get("/health")
def health():
    return {"ok": True, "visitors": VISITORS}

# ---------------- Cafés ----------------

@app.get("/cafes", response_model=list[CafeWithStats])
def list_cafes(
    search: str = "",
    area: Optional[str] = None,
    visited: bool = False,
    unvisited: bool = False,
    website: Literal["all", "with", "without"] = "all",
    sort: Optional[Literal["rating", "visits", "date", "name"]] = None,
    db: Session = Depends(get_db),
):
    try:
        cafes = [with_stats(c) for c in all_cafes(db)]
    except SQLAlchemyError:
        raise store_failure(db, "fetch cafes")

    view = CafeListView(
        search=search,
        area=area,
        sort_by=sort,
        visited_only=visited,
        unvisited_only=unvisited,
        website=website,
    )
    return view.apply(cafes)


@app.post("/cafes", response_model=CafeOut, status_code=201)
def create_cafe(payload: CafeCreate, db: Session = Depends(get_db)):
    cafe = Cafe(**payload.model_dump())
    try:
        db.add(cafe)
        db.commit()
        db.refresh(cafe)
    except SQLAlchemyError:
        raise store_failure(db, "create cafe")

    logger.info("Created cafe %s (%s)", cafe.id, cafe.name)
    return cafe


@app.get("/cafes/areas", response_model=list[str])
def list_areas(visited: bool = False, unvisited: bool = False, db: Session = Depends(get_db)):
    try:
        cafes = [with_stats(c) for c in all_cafes(db)]
    except SQLAlchemyError:
        raise store_failure(db, "fetch areas")
    return areas(CafeListView(visited_only=visited, unvisited_only=unvisited).apply(cafes))


@app.get("/cafes/search", response_model=list[CafeWithStats])
def search_cafes(q: str = "", db: Session = Depends(get_db)):
    if not q.strip():
        return []
    try:
        cafes = all_cafes(db)
    except SQLAlchemyError:
        raise store_failure(db, "search cafes")
    return [with_stats(c) for c in suggest(q, cafes)]


@app.get("/cafes/nearest", response_model=list[NearbyCafe])
def nearest_cafes(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    limit: int = Query(default=NEAREST_LIMIT, ge=1, le=50),
    db: Session = Depends(get_db),
):
    try:
        cafes = db.query(Cafe).filter(Cafe.latitude.isnot(None), Cafe.longitude.isnot(None)).order_by(Cafe.id).all()
    except SQLAlchemyError:
        raise store_failure(db, "fetch nearest cafes")

    return [
        NearbyCafe(**CafeOut.model_validate(cafe).model_dump(), distance_km=distance)
        for cafe, distance in nearest(lat, lng, cafes, limit)
    ]


@app.get("/cafes/{cafe_id}", response_model=CafeDetail)
def get_cafe(cafe_id: int, db: Session = Depends(get_db)):
    try:
        cafe = get_cafe_or_404(cafe_id, db)
        visits = (
            db.query(Visit)
            .filter(Visit.cafe_id == cafe_id)
            .order_by(Visit.visit_date.desc(), Visit.id.desc())
            .all()
        )
    except SQLAlchemyError:
        raise store_failure(db, "fetch cafe")

    return CafeDetail(
        **CafeOut.model_validate(cafe).model_dump(),
        **cafe_aggregates(visits).model_dump(),
        visits=[VisitOut.model_validate(v) for v in visits],
        all_recommendations=recommendations(visits),
    )

# ---------------- Visits ----------------

@app.get("/visits", response_model=list[VisitWithCafe])
def list_visits(db: Session = Depends(get_db)):
    try:
        return (
            db.query(Visit)
            .options(joinedload(Visit.cafe))
            .order_by(Visit.visit_date.desc(), Visit.id.desc())
            .all()
        )
    except SQLAlchemyError:
        raise store_failure(db, "fetch visits")


@app.post("/visits", response_model=VisitWithCafe, status_code=201)
def create_visit(payload: VisitCreate, db: Session = Depends(get_db)):
    try:
        get_cafe_or_404(payload.cafe_id, db)

        data = payload.model_dump()
        data["visit_date"] = payload.visit_date or date.today()
        visit = Visit(**data)

        db.add(visit)
        db.commit()
        db.refresh(visit)
    except SQLAlchemyError:
        raise store_failure(db, "create visit")

    logger.info("%s visited cafe %s on %s", visit.visitor_name, visit.cafe_id, visit.visit_date)
    return visit


@app.patch("/visits/{visit_id}", response_model=VisitWithCafe)
def update_visit(visit_id: int, payload: VisitUpdate, db: Session = Depends(get_db)):
    try:
        visit = get_visit_or_404(visit_id, db)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(visit, field, value)
        db.commit()
        db.refresh(visit)
    except SQLAlchemyError:
        raise store_failure(db, "update visit")

    logger.info("Updated visit %s", visit_id)
    return visit


@app.delete("/visits/{visit_id}")
def delete_visit(visit_id: int, db: Session = Depends(get_db)):
    try:
        visit = get_visit_or_404(visit_id, db)
        db.delete(visit)
        db.commit()
    except SQLAlchemyError:
        raise store_failure(db, "delete visit")

    logger.info("Deleted visit %s", visit_id)
    return {"success": True}

# ---------------- Stats & map ----------------

@app.get("/stats", response_model=SiteStats)
def get_stats(db: Session = Depends(get_db)):
    try:
        cafes = all_cafes(db)
        visits = db.query(Visit).order_by(Visit.id).all()
    except SQLAlchemyError:
        raise store_failure(db, "fetch stats")
    return site_stats(cafes, visits)


@app.get("/map/markers", response_model=list[MapMarker])
def get_markers(
    search: str = "",
    show: Literal["all", "visited", "unvisited"] = "all",
    db: Session = Depends(get_db),
):
    try:
        cafes = [with_stats(c) for c in all_cafes(db)]
    except SQLAlchemyError:
        raise store_failure(db, "fetch map markers")
    view = CafeListView(
        search=search,
        visited_only=show == "visited",
        unvisited_only=show == "unvisited",
        search_fields=MAP_SEARCH_FIELDS,
    )
    return map_markers(view.apply(cafes))
