"""Check-in ledger and configuration models."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gateway_checkin.models.base import Base, TimestampMixin

# Date format of CheckinRecord.checkin_date
CHECKIN_DATE_FORMAT = "%Y-%m-%d"

# Values used when no configuration row has been saved yet
CHECKIN_CONFIG_DEFAULTS = {
    "enabled": False,
    "min_quota": 100,
    "max_quota": 100,
    "checkin_code_enabled": False,
    "checkin_code": "",
    "consecutive_reward_enabled": False,
    "consecutive_reward_quota": 50,
    "calendar_enabled": False,
}


class CheckinRecord(Base, TimestampMixin):
    """One successful daily check-in. Never updated after insert."""

    __tablename__ = "checkin_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Quota granted, bonus included
    quota: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    # YYYY-MM-DD in the check-in time zone
    checkin_date: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
    )

    checkin_code: Mapped[str] = mapped_column(
        String(20),
        default="",
        nullable=False,
    )

    __table_args__ = (
        # One grant per user per day
        UniqueConstraint("user_id", "checkin_date", name="uq_checkin_user_date"),
        Index("ix_checkin_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CheckinRecord user={self.user_id} date={self.checkin_date}>"


class CheckinConfig(Base, TimestampMixin):
    """Singleton row holding the check-in feature settings."""

    __tablename__ = "checkin_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    min_quota: Mapped[int] = mapped_column(Integer, default=100, nullable=False)
    # 0 means unbounded; currently not used to vary the grant
    max_quota: Mapped[int] = mapped_column(Integer, default=100, nullable=False)

    checkin_code_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    checkin_code: Mapped[str] = mapped_column(String(20), default="", nullable=False)

    consecutive_reward_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    consecutive_reward_quota: Mapped[int] = mapped_column(
        Integer, default=50, nullable=False
    )

    calendar_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    @classmethod
    def defaults(cls) -> "CheckinConfig":
        """Transient config carrying default values (not added to a session)."""
        return cls(**CHECKIN_CONFIG_DEFAULTS)

    def to_dict(self) -> dict:
        data = {key: getattr(self, key) for key in CHECKIN_CONFIG_DEFAULTS}
        data["id"] = self.id
        data["created_at"] = self.created_at
        data["updated_at"] = self.updated_at
        return data

    def __repr__(self) -> str:
        return f"<CheckinConfig enabled={self.enabled} min={self.min_quota}>"
