"""
Read-through cache for place-search provider responses.

Entries live in the cache_entries table. There is no capacity bound and no
invalidation API: an entry is served until it is older than the TTL the
caller reads it with, then dropped.
"""

from datetime import datetime
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from meetup import db
from meetup.models import CacheEntry


def search_cache_key(lat, lng, radius, place_type, keyword, min_price, max_price, open_now) -> str:
    """Build the cache key for a nearby search from every query parameter."""
    return (
        f"places-search:{lat}-{lng}-{radius}-{place_type}-{keyword or ''}"
        f"-{min_price}-{max_price}-{bool(open_now)}"
    )


def details_cache_key(place_id: str) -> str:
    return f"place-details:{place_id}"


def walking_cache_key(origin_lat, origin_lng, dest_lat, dest_lng) -> str:
    return f"walking-distance:{origin_lat}-{origin_lng}-{dest_lat}-{dest_lng}"


class RestaurantCache:
    """TTL memoization of provider results."""

    def get(self, key: str, ttl: int):
        """
        Get a cached value.

        Args:
            key: Cache key
            ttl: Maximum age in seconds for the entry to count as fresh

        Returns:
            The cached value, or None if absent or expired
        """
        entry = CacheEntry.query.filter_by(key=key).first()
        if entry is None:
            return None

        if entry.is_expired(ttl):
            db.session.delete(entry)
            db.session.commit()
            return None

        return entry.value

    def set(self, key: str, value) -> None:
        """Store a value, replacing any previous entry and resetting its age."""
        try:
            entry = CacheEntry.query.filter_by(key=key).first()
            if entry:
                entry.value = value
                entry.created_at = datetime.utcnow()
            else:
                db.session.add(CacheEntry(key=key, value=value, created_at=datetime.utcnow()))
            db.session.commit()
        except SQLAlchemyError as e:
            # Cache writes never propagate errors
            db.session.rollback()
            current_app.logger.error(f"Cache write failed for {key}: {e}")


# Singleton instance
restaurant_cache = RestaurantCache()
