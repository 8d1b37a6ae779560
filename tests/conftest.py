import itertools
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import app.db.models  # noqa: F401
from app.db.base import Base, get_db
from app.db.models.api_tokens import ApiToken
from app.db.models.customers import Customer
from app.db.models.order_items import OrderItem
from app.db.models.orders import Order
from app.db.models.products import Product
from app.db.models.sales_reps import SalesRep
from app.db.models.sync_updates import SyncUpdate
from app.main import app as api


def utcnow():
    return datetime.now(timezone.utc)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    api.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=api), base_url="http://test") as c:
        yield c
    api.dependency_overrides.clear()


class Seed:
    """Inserts rows with every server-side default filled in explicitly."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._codes = itertools.count(1)

    async def _save(self, row):
        self.db.add(row)
        await self.db.commit()
        return row

    async def sales_rep(self, name="Ana", active=True) -> SalesRep:
        return await self._save(SalesRep(code=next(self._codes), name=name, active=active))

    async def product(self, name="Soap", code=None, unit="UN", price=Decimal("10"), active=True) -> Product:
        return await self._save(Product(
            code=code if code is not None else next(self._codes),
            name=name,
            unit=unit,
            price=price,
            active=active,
        ))

    async def customer(self, sales_rep, name="Corner Shop", active=True) -> Customer:
        return await self._save(Customer(
            code=next(self._codes),
            name=name,
            sales_rep_id=sales_rep.id if sales_rep else None,
            active=active,
        ))

    async def order(
        self,
        sales_rep=None,
        total=Decimal("0"),
        source_project="mobile",
        import_status="pending",
        created_at=None,
        items=(),
        mobile_order_id=None,
        customer_name="Corner Shop",
    ) -> Order:
        created_at = created_at or utcnow()
        order = Order(
            code=next(self._codes),
            customer_name=customer_name,
            sales_rep_id=sales_rep.id if sales_rep else None,
            sales_rep_name=sales_rep.name if sales_rep else None,
            date=created_at,
            total=total,
            source_project=source_project,
            import_status=import_status,
            mobile_order_id=mobile_order_id,
            created_at=created_at,
            updated_at=created_at,
        )
        order.items = [
            OrderItem(
                line_number=line_number,
                product_id=product.id,
                product_name=product.name,
                product_code=product.code,
                quantity=Decimal(str(quantity)),
                unit_price=product.price,
                price=product.price,
                total=product.price * Decimal(str(quantity)),
                unit=product.unit,
                created_at=created_at,
                updated_at=created_at,
            )
            for line_number, (product, quantity) in enumerate(items, start=1)
        ]
        return await self._save(order)

    async def token(self, sales_rep, value=None, expires_at=None, is_active=True) -> ApiToken:
        return await self._save(ApiToken(
            token=value or f"token-{next(self._codes)}",
            sales_rep_id=sales_rep.id,
            name="phone",
            expires_at=expires_at,
            is_active=is_active,
        ))

    async def sync_update(self, data_types=("products",), is_active=True, completed_at=None, age=timedelta(0)) -> SyncUpdate:
        created_at = utcnow() - age
        return await self._save(SyncUpdate(
            data_types=list(data_types),
            description=", ".join(data_types),
            is_active=is_active,
            completed_at=completed_at,
            created_at=created_at,
            updated_at=created_at,
        ))


@pytest.fixture
def seed(db):
    return Seed(db)


def bearer(token) -> dict:
    return {"Authorization": f"Bearer {token.token}"}


@pytest.fixture
def auth_headers():
    return bearer
