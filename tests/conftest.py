import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bajeti.db.core import Base, CategoryDB, get_db
from bajeti.main import app


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
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
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def system_categories(db):
    categories = {}
    for name in ("Groceries", "Rent", "Transport", "Salary"):
        category = CategoryDB(name=name, is_system=True)
        db.add(category)
        categories[name] = category
    db.commit()
    return {name: category.id for name, category in categories.items()}


def sign_up(client, email="amani@example.com", currency="TZS"):
    response = client.post("/users/", json={
        "email": email,
        "password": "password123",
        "confirm_password": "password123",
        "full_name": "Amani Mushi",
        "currency": currency,
    })
    assert response.status_code == 201, response.text
    return {"X-User-Id": str(response.json()["id"])}
