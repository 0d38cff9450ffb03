from pydantic import BaseModel


class DashboardStats(BaseModel):
    users: int
    sites: int
    active_sites: int
    activities: int
    pending_material_requests: int
    pending_bookings: int
    inventory_items: int
    message_logs: int
