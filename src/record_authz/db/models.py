"""
record_authz.db.models

Persistence schema for authorization-protected records.

Responsibilities:
- Define the `WeatherForecast` record, which carries owner/assignee ids.
- Expose the record's authorization snapshot for policy checks.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from record_authz.auth.models import ResourceAuthFields
from record_authz.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class WeatherForecast(Base):
    __tablename__ = "weather_forecasts"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    # Identity ids of the principals who own / are assigned this record ("" = nobody).
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, default="", index=True)
    assignee_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    date: Mapped[datetime] = mapped_column(nullable=False, index=True)
    temperature_c: Mapped[int] = mapped_column(nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    @property
    def temperature_f(self) -> int:
        return 32 + int(self.temperature_c / 0.5556)

    def auth_fields(self) -> ResourceAuthFields:
        return ResourceAuthFields.of(self)


# --- Module Notes -----------------------------------------------------------
# Authorization never reads the ORM object directly; it only sees the frozen
# `ResourceAuthFields` snapshot taken after the record is loaded.
