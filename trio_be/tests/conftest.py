import os
import shutil
import tempfile

import pytest

# Configure the app before anything imports it
_TMP = tempfile.mkdtemp(prefix="trio-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["MEDIA_ROOT"] = os.path.join(_TMP, "media")
os.environ["ADMIN_EMAIL"] = "admin@triocollection.com"
os.environ["ADMIN_PASSWORD"] = "s3cret-pass"

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.models.database import Base, SessionLocal, engine, init_db  # noqa: E402
from app.models.product import Product  # noqa: E402
from app.schemas.product import ProductOut  # noqa: E402
from app.utils.storage import MEDIA_ROOT  # noqa: E402

ADMIN_AUTH = ("admin@triocollection.com", "s3cret-pass")


@pytest.fixture(autouse=True)
def fresh_database():
    init_db()
    MEDIA_ROOT.mkdir(parents=True, exist_ok=True)
    yield
    Base.metadata.drop_all(bind=engine)
    shutil.rmtree(MEDIA_ROOT, ignore_errors=True)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_product(db):
    def _make(**overrides):
        values = {
            "name": "Oxford Shirt",
            "category": "Shirts",
            "price": 500.0,
            "sizes": ["S", "M", "L"],
            "description": "Cotton oxford shirt",
            "images": ["/media/products/oxford.jpg"],
            "in_stock": True,
        }
        values.update(overrides)
        product = Product(**values)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def product_out():
    def _make(id=1, price=500.0, **overrides):
        values = {"id": id, "name": f"Product {id}", "category": "Shirts", "price": price}
        values.update(overrides)
        return ProductOut(**values)

    return _make
