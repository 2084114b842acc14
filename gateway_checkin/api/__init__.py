"""API routers."""

from gateway_checkin.api import checkin

__all__ = ["checkin"]
