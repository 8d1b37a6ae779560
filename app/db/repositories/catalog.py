from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from app.db.models.customers import Customer
from app.db.models.products import Product
from app.db.models.sales_reps import SalesRep


async def get_product_by_id(db: AsyncSession, product_id: UUID) -> Optional[Product]:
    result = await db.execute(select(Product).where(Product.id == product_id))
    return result.scalar_one_or_none()

async def get_active_products(db: AsyncSession) -> List[Product]:
    result = await db.execute(
        select(Product).where(Product.active.is_(True)).order_by(Product.name)
    )
    return list(result.scalars().all())

async def get_sales_rep_by_id(db: AsyncSession, sales_rep_id: UUID) -> Optional[SalesRep]:
    result = await db.execute(select(SalesRep).where(SalesRep.id == sales_rep_id))
    return result.scalar_one_or_none()

async def get_active_sales_reps(db: AsyncSession) -> List[SalesRep]:
    result = await db.execute(
        select(SalesRep).where(SalesRep.active.is_(True)).order_by(SalesRep.name)
    )
    return list(result.scalars().all())

async def get_active_customers_for_sales_rep(
    db: AsyncSession,
    sales_rep_id: UUID
) -> List[Customer]:
    result = await db.execute(
        select(Customer)
        .where(Customer.sales_rep_id == sales_rep_id)
        .where(Customer.active.is_(True))
        .order_by(Customer.name)
    )
    return list(result.scalars().all())
