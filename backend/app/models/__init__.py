from .base import Base
from .landing_page import LandingPage
from .admin import Admin
from .audit_log import AuditLog

__all__ = [
    "Base",
    "LandingPage",
    "Admin",
    "AuditLog",
]
