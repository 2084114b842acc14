"""User model.

Only the columns the check-in core reads or mutates are mapped here; the
rest of the gateway's user table is owned elsewhere.
"""

from enum import IntEnum

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gateway_checkin.models.base import Base, TimestampMixin


class UserRole(IntEnum):
    """User roles."""

    GUEST = 0
    COMMON = 1
    ADMIN = 10
    ROOT = 100


class UserStatus(IntEnum):
    """User account status."""

    ENABLED = 1
    DISABLED = 2


class User(Base, TimestampMixin):
    """Gateway user account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
    )
    display_name: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )

    role: Mapped[int] = mapped_column(
        Integer,
        default=UserRole.COMMON.value,
        nullable=False,
    )
    status: Mapped[int] = mapped_column(
        Integer,
        default=UserStatus.ENABLED.value,
        nullable=False,
    )

    # Remaining balance in quota units
    quota: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
    )
    used_quota: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
    )

    @property
    def is_admin(self) -> bool:
        return self.role >= UserRole.ADMIN

    @property
    def is_enabled(self) -> bool:
        return self.status == UserStatus.ENABLED

    def __repr__(self) -> str:
        return f"<User {self.username}>"
