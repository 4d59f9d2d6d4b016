import os

# keep the app's own engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models import Cafe, Visit


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def add_cafe(db):
    def _add(name, **kwargs):
        kwargs.setdefault("source", "master")
        cafe = Cafe(name=name, **kwargs)
        db.add(cafe)
        db.commit()
        db.refresh(cafe)
        return cafe

    return _add


@pytest.fixture
def add_visit(db):
    def _add(cafe, visitor="Anna", ratings=(3, 3, 3, 3), visit_date=date(2024, 5, 1), **kwargs):
        vibe, food, coffee, price = ratings
        visit = Visit(
            cafe_id=cafe.id,
            visitor_name=visitor,
            visit_date=visit_date,
            vibe_rating=vibe,
            food_rating=food,
            coffee_rating=coffee,
            price_rating=price,
            **kwargs,
        )
        db.add(visit)
        db.commit()
        db.refresh(visit)
        return visit

    return _add
