"""User-facing activity log model."""

from datetime import datetime
from enum import IntEnum

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from gateway_checkin.models.base import Base, utcnow


class LogType(IntEnum):
    """Log entry categories shared with the rest of the gateway."""

    UNKNOWN = 0
    TOPUP = 1
    CONSUME = 2
    MANAGE = 3
    SYSTEM = 4
    ERROR = 5


class Log(Base):
    """Activity log line shown in the user's log page."""

    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[int] = mapped_column(
        Integer,
        default=LogType.UNKNOWN.value,
        nullable=False,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Log user={self.user_id} type={self.type}>"
