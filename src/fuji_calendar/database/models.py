"""Database models for the Fuji event store.

Events are precomputed per location and year and stored one row per
alignment. The calendar API only ever reads them.

## Schema Overview

```
locations
└── location_events (1:N) - ON DELETE/UPDATE CASCADE
```

## location_events indexes

- (location_id, event_date): per-location date range scans
- (event_date): whole-calendar date scans
- (event_type, event_date): type-filtered scans
- (quality_score DESC): best-shot ordering
- UNIQUE (location_id, event_date, event_time, event_type): no duplicate events
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from fuji_calendar.models.event import Accuracy, StoredEventType


class Base(DeclarativeBase):
    """Base class for all database models."""


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class Location(Base):
    """Shooting location.

    fuji_azimuth / fuji_elevation are degrees from the location to the
    summit; fuji_distance is in meters.
    """

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    prefecture: Mapped[str] = mapped_column(String(100), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    elevation: Mapped[float] = mapped_column(Float, nullable=False)

    # Precomputed geometry towards the summit
    fuji_azimuth: Mapped[float | None] = mapped_column(Float)
    fuji_elevation: Mapped[float | None] = mapped_column(Float)
    fuji_distance: Mapped[float | None] = mapped_column(Float)

    description: Mapped[str | None] = mapped_column(Text)
    access_info: Mapped[str | None] = mapped_column(Text)
    parking_info: Mapped[str | None] = mapped_column(Text)
    measurement_notes: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    events: Mapped[list["LocationEvent"]] = relationship(
        back_populates="location",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_locations_coords", "latitude", "longitude"),
        Index("idx_locations_prefecture", "prefecture"),
        Index("idx_locations_fuji_geometry", "fuji_azimuth", "fuji_elevation"),
    )

    def __repr__(self) -> str:
        return f"<Location {self.name}>"


class LocationEvent(Base):
    """A precomputed Diamond or Pearl Fuji event at one location.

    event_date is the JST calendar date of event_time.
    """

    __tablename__ = "location_events"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    location_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("locations.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )

    event_type: Mapped[StoredEventType] = mapped_column(
        SAEnum(
            StoredEventType,
            name="event_type",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Position of the sun/moon at event_time
    azimuth: Mapped[float] = mapped_column(Float, nullable=False)
    altitude: Mapped[float] = mapped_column(Float, nullable=False)

    accuracy: Mapped[Accuracy | None] = mapped_column(
        SAEnum(Accuracy, name="accuracy", values_callable=_enum_values)
    )
    quality_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Pearl Fuji only
    moon_phase: Mapped[float | None] = mapped_column(Float)
    moon_illumination: Mapped[float | None] = mapped_column(Float)

    calculation_year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    location: Mapped["Location"] = relationship(back_populates="events")

    __table_args__ = (
        UniqueConstraint(
            "location_id",
            "event_date",
            "event_time",
            "event_type",
            name="unique_location_event",
        ),
        Index("idx_location_date", "location_id", "event_date"),
        Index("idx_event_date", "event_date"),
        Index("idx_event_type_date", "event_type", "event_date"),
        CheckConstraint(
            "quality_score >= 0.0 AND quality_score <= 1.0",
            name="quality_score_range",
        ),
        CheckConstraint(
            "moon_phase IS NULL OR (moon_phase >= 0.0 AND moon_phase <= 1.0)",
            name="moon_phase_range",
        ),
        CheckConstraint(
            "moon_illumination IS NULL OR "
            "(moon_illumination >= 0.0 AND moon_illumination <= 1.0)",
            name="moon_illumination_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<LocationEvent {self.event_type.value} {self.event_date}>"


# Declared outside the class body so the DESC ordering can reference the column.
Index("idx_quality_score", LocationEvent.quality_score.desc())
