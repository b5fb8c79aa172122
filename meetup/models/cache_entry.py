"""
Cache entry model backing the restaurant cache.

Values are stored as JSON alongside their creation time; freshness is
judged by the reader against a time-to-live.
"""

from datetime import datetime, timedelta
from meetup import db


class CacheEntry(db.Model):
    """Cached provider response keyed by query parameters."""
    __tablename__ = 'cache_entries'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(500), unique=True, nullable=False)
    value = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<CacheEntry {self.key}>'

    def is_expired(self, ttl_seconds, now=None):
        now = now or datetime.utcnow()
        return self.created_at + timedelta(seconds=ttl_seconds) <= now

    @classmethod
    def cleanup_expired(cls, older_than_seconds):
        """
        Remove entries older than the given age.

        Call this periodically (e.g., via cron) to prevent table bloat.
        """
        cutoff = datetime.utcnow() - timedelta(seconds=older_than_seconds)
        deleted = cls.query.filter(cls.created_at < cutoff).delete()
        db.session.commit()
        return deleted
