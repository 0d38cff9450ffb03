import logging

from fastapi import Depends, FastAPI, status
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from core.auth import auth_backend, current_active_user, fastapi_users
from core.config import settings
from db.database import create_db_and_tables
from routers.activities import router as activities_router
from routers.auth import router as otp_router
from routers.authorized_persons import router as authorized_persons_router
from routers.bookings import router as bookings_router
from routers.customer_inquiries import router as customer_inquiries_router
from routers.dashboard import router as dashboard_router
from routers.employee_otps import router as employee_otps_router
from routers.inventory import router as inventory_router
from routers.invoices import router as invoices_router
from routers.material_requests import router as material_requests_router
from routers.materials import router as materials_router
from routers.message_logs import router as message_logs_router
from routers.purchase_orders import router as purchase_orders_router
from routers.sessions import router as sessions_router
from routers.sites import router as sites_router
from routers.user_site_assignments import router as assignments_router
from routers.users import router as users_router
from routers.vendors import router as vendors_router
from schemas.users import AdminRead, AdminUpdate

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("SiteOps admin API ready")
    yield


app = FastAPI(
    title="SiteOps Admin API",
    description="Back office for sites, field workers, inventory and purchasing",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Authentication routes (email one-time codes + fastapi-users JWT)
app.include_router(otp_router, prefix="/auth/otp", tags=["auth"])
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])
app.include_router(fastapi_users.get_users_router(AdminRead, AdminUpdate), prefix="/accounts", tags=["accounts"])

# Dashboard pages; every one requires a signed-in administrator
signed_in = [Depends(current_active_user)]

app.include_router(dashboard_router, prefix="", tags=["dashboard"], dependencies=signed_in)
app.include_router(users_router, prefix="/users", tags=["users"], dependencies=signed_in)
app.include_router(sites_router, prefix="/sites", tags=["sites"], dependencies=signed_in)
app.include_router(activities_router, prefix="/activities", tags=["activities"], dependencies=signed_in)
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"], dependencies=signed_in)
app.include_router(material_requests_router, prefix="/material-requests", tags=["material-requests"], dependencies=signed_in)
app.include_router(bookings_router, prefix="/bookings", tags=["bookings"], dependencies=signed_in)
app.include_router(message_logs_router, prefix="/message-logs", tags=["message-logs"], dependencies=signed_in)
app.include_router(sessions_router, prefix="/sessions", tags=["sessions"], dependencies=signed_in)
app.include_router(employee_otps_router, prefix="/employee-otps", tags=["employee-otps"], dependencies=signed_in)
app.include_router(assignments_router, prefix="/user-site-assignments", tags=["user-site-assignments"], dependencies=signed_in)
app.include_router(vendors_router, prefix="/vendors", tags=["vendors"], dependencies=signed_in)
app.include_router(materials_router, prefix="/materials", tags=["materials"], dependencies=signed_in)
app.include_router(authorized_persons_router, prefix="/authorized-persons", tags=["authorized-persons"], dependencies=signed_in)
app.include_router(purchase_orders_router, prefix="/purchase-orders", tags=["purchase-orders"], dependencies=signed_in)
app.include_router(customer_inquiries_router, prefix="/customer-inquiries", tags=["customer-inquiries"], dependencies=signed_in)
app.include_router(invoices_router, prefix="/invoices", tags=["invoices"], dependencies=signed_in)


# Must stay last: any GET unmatched above is an unknown page.
# Writes keep the router 405 for a known path with the wrong method.
@app.get("/{full_path:path}", include_in_schema=False, dependencies=signed_in)
async def page_not_found(full_path: str):
    logger.warning("Unknown page requested: /%s", full_path)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Page not found", "path": f"/{full_path}"},
    )


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
