from collections.abc import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from core.config import settings


class Base(DeclarativeBase):
    pass


engine = create_async_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


# Model registry; imported last so every module can use `Base` from here.
from .admin import AdminAccount, EmailOtp  # noqa: E402,F401
from .users import User  # noqa: E402,F401
from .site import Site, UserSiteAssignment  # noqa: E402,F401
from .activity import Activity  # noqa: E402,F401
from .inventory import InventoryItem, InventoryTransaction  # noqa: E402,F401
from .material_request import MaterialRequest  # noqa: E402,F401
from .booking import Booking  # noqa: E402,F401
from .messaging import MessageLog, ConversationSession, EmployeeOtp  # noqa: E402,F401
from .purchasing import (  # noqa: E402,F401
    Vendor,
    Material,
    AuthorizedPerson,
    PurchaseOrder,
    PurchaseOrderItem,
)
from .inquiry import CustomerInquiry  # noqa: E402,F401
from .invoice import Invoice  # noqa: E402,F401
