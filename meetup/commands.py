"""CLI commands: seed demo users and prune the restaurant cache."""
import click

from meetup import db
from meetup.models import User, CacheEntry


DEMO_USERS = [
    ('ada', 'Ada Lovelace', 'ada@example.com'),
    ('grace', 'Grace Hopper', 'grace@example.com'),
    ('linus', 'Linus Torvalds', 'linus@example.com'),
    ('guido', 'Guido van Rossum', 'guido@example.com'),
]


def seed_users():
    """Add demo users if they don't exist. Returns summary."""
    added = 0
    skipped = 0

    for username, name, email in DEMO_USERS:
        existing = User.query.filter_by(username=username).first()
        if not existing:
            db.session.add(User(username=username, name=name, email=email))
            added += 1
        else:
            skipped += 1

    db.session.commit()
    total = User.query.count()

    return {
        'added': added,
        'skipped': skipped,
        'total': total
    }


def register_commands(app):

    @app.cli.command('seed-users')
    def seed_users_command():
        """Add demo users for local development."""
        result = seed_users()
        click.echo(f"Added {result['added']}, skipped {result['skipped']}, total {result['total']}")

    @app.cli.command('prune-cache')
    @click.option('--older-than', default=86400, show_default=True,
                  help='Remove cache entries older than this many seconds.')
    def prune_cache_command(older_than):
        """Delete stale restaurant cache entries."""
        deleted = CacheEntry.cleanup_expired(older_than)
        click.echo(f"Deleted {deleted} cache entries")
