import os
import tempfile
from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("DATABASE_URL", f"sqlite:///{tempfile.gettempdir()}/cake_store_test_app.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ["SEED_ON_STARTUP"] = "false"

import app.models  # noqa: F401
from app.core.security import create_access_token, hash_password
from app.db.base_class import Base
from app.db.session import get_db
from app.main import app
from app.models.product import Product
from app.models.user import User

DEFAULT_PASSWORD = "StrongPass1"


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    db_file = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    db_file.close()

    engine = create_engine(
        f"sqlite:///{db_file.name}",
        connect_args={"check_same_thread": False},
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        os.unlink(db_file.name)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def create_user(db_session: Session) -> Callable[..., User]:
    def _create_user(email: str, name: str = "Test User", is_admin: bool = False) -> User:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(DEFAULT_PASSWORD),
            is_admin=is_admin,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture()
def create_product(db_session: Session) -> Callable[..., Product]:
    def _create_product(name: str, price: int = 100, category: str = "birthday") -> Product:
        product = Product(
            name=name,
            description=f"{name} description",
            price=price,
            image=f"https://img.example.com/{name.lower().replace(' ', '-')}.jpg",
            category=category,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _create_product


@pytest.fixture()
def auth_headers() -> Callable[[User], dict]:
    def _auth_headers(user: User) -> dict:
        token = create_access_token(
            data={"sub": str(user.id), "email": user.email, "is_admin": bool(user.is_admin)}
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
