"""Favorite locations and events, kept in a local JSON file.

## Storage Format

```json
{
  "locations": [{"id": 1, "name": "...", "prefecture": "...", "addedAt": "..."}],
  "events": [{"id": "diamond_sunrise-1-2025-02-10", "time": "...", ...}]
}
```

Keys are camelCase, matching the REST API. A missing or unreadable file
reads as no favorites.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from fuji_calendar.config import get_settings
from fuji_calendar.models.event import EventType, FujiEvent
from fuji_calendar.models.favorites import (
    FavoriteEvent,
    FavoriteLocation,
    Favorites,
    FavoritesStats,
)
from fuji_calendar.models.location import Location

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class FavoritesService:
    """Manage favorites stored in a JSON file.

    Example:
        ```python
        favorites = FavoritesService()
        favorites.add_location(location)
        upcoming = favorites.get_upcoming_events()
        ```
    """

    def __init__(
        self,
        path: Path | str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the service.

        Args:
            path: JSON file to use. Defaults to settings.favorites_path.
            clock: Returns the current time. Defaults to UTC now.
        """
        self.path = Path(path) if path is not None else get_settings().favorites_path
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self) -> datetime:
        return _aware(self._clock())

    def load(self) -> Favorites:
        """Read the favorites file, treating any problem as empty."""
        if not self.path.exists():
            return Favorites()

        try:
            return Favorites.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load favorites from {self.path}: {e}")
            return Favorites()

    def _save(self, favorites: Favorites) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(favorites.to_json_dict(), ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to save favorites to {self.path}: {e}")
            return False
        return True

    # Locations

    def add_location(self, location: Location) -> bool:
        """Add a location. Returns False if it is already a favorite."""
        favorites = self.load()
        if any(fav.id == location.id for fav in favorites.locations):
            return False

        favorites.locations.append(
            FavoriteLocation(
                id=location.id,
                name=location.name,
                prefecture=location.prefecture,
                latitude=location.latitude,
                longitude=location.longitude,
                added_at=self._now(),
            )
        )
        return self._save(favorites)

    def remove_location(self, location_id: int) -> bool:
        """Remove a location. Returns False if it was not a favorite."""
        favorites = self.load()
        remaining = [fav for fav in favorites.locations if fav.id != location_id]
        if len(remaining) == len(favorites.locations):
            return False
        favorites.locations = remaining
        return self._save(favorites)

    def is_location_favorite(self, location_id: int) -> bool:
        return any(fav.id == location_id for fav in self.load().locations)

    def get_locations(self) -> list[FavoriteLocation]:
        """Favorite locations, most recently added first."""
        return sorted(
            self.load().locations,
            key=lambda fav: _aware(fav.added_at),
            reverse=True,
        )

    # Events

    def add_event(self, event: FujiEvent) -> bool:
        """Add an event. Returns False if it is already a favorite."""
        favorites = self.load()
        if any(fav.id == event.id for fav in favorites.events):
            return False

        favorites.events.append(
            FavoriteEvent(
                id=event.id,
                type=event.type,
                sub_type=event.sub_type.value,
                time=event.time,
                location_id=event.location.id,
                location_name=event.location.name,
                azimuth=event.azimuth,
                elevation=event.elevation or 0.0,
                added_at=self._now(),
            )
        )
        return self._save(favorites)

    def remove_event(self, event_id: str) -> bool:
        """Remove an event. Returns False if it was not a favorite."""
        favorites = self.load()
        remaining = [fav for fav in favorites.events if fav.id != event_id]
        if len(remaining) == len(favorites.events):
            return False
        favorites.events = remaining
        return self._save(favorites)

    def is_event_favorite(self, event_id: str) -> bool:
        return any(fav.id == event_id for fav in self.load().events)

    def get_events(self) -> list[FavoriteEvent]:
        """Favorite events ordered by event time."""
        return sorted(self.load().events, key=lambda fav: _aware(fav.time))

    def get_upcoming_events(self) -> list[FavoriteEvent]:
        now = self._now()
        return [fav for fav in self.get_events() if _aware(fav.time) > now]

    def get_past_events(self) -> list[FavoriteEvent]:
        """Past favorite events, most recent first."""
        now = self._now()
        past = [fav for fav in self.get_events() if _aware(fav.time) <= now]
        return list(reversed(past))

    # Whole collection

    def get_stats(self) -> FavoritesStats:
        favorites = self.load()
        now = self._now()
        events = favorites.events

        return FavoritesStats(
            total_locations=len(favorites.locations),
            total_events=len(events),
            diamond_events=sum(1 for e in events if e.type == EventType.DIAMOND),
            pearl_events=sum(1 for e in events if e.type == EventType.PEARL),
            upcoming_events=sum(1 for e in events if _aware(e.time) > now),
            past_events=sum(1 for e in events if _aware(e.time) <= now),
        )

    def clear(self) -> bool:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to clear favorites at {self.path}: {e}")
            return False
        return True

    def export_json(self) -> str:
        """Export all favorites as indented JSON."""
        return json.dumps(self.load().to_json_dict(), ensure_ascii=False, indent=2)

    def import_json(self, data: str) -> bool:
        """Replace all favorites with previously exported JSON.

        Returns:
            False if the data is not a favorites document
        """
        try:
            parsed = json.loads(data)
        except ValueError as e:
            logger.error(f"Failed to import favorites: {e}")
            return False

        if (
            not isinstance(parsed, dict)
            or not isinstance(parsed.get("locations"), list)
            or not isinstance(parsed.get("events"), list)
        ):
            logger.error("Failed to import favorites: invalid data structure")
            return False

        try:
            favorites = Favorites.model_validate(parsed)
        except ValidationError as e:
            logger.error(f"Failed to import favorites: {e}")
            return False

        return self._save(favorites)
