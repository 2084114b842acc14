"""Quota display formatting."""

from gateway_checkin.config import get_settings


def format_quota(quota: int, quota_per_unit: float | None = None) -> str:
    """Render a raw quota amount in currency units with two decimals.

    >>> format_quota(500000, 500000)
    '1.00'
    """
    if quota_per_unit is None:
        quota_per_unit = get_settings().quota_per_unit
    return f"{quota / quota_per_unit:.2f}"


def quota_display(quota: int, quota_per_unit: float | None = None) -> str:
    """Currency string shown to users, e.g. ``$0.20``."""
    return "$" + format_quota(quota, quota_per_unit)
