"""
Tests for the restaurant cache.
"""
from datetime import datetime, timedelta

from meetup import db
from meetup.models import CacheEntry
from meetup.services.cache_service import (
    restaurant_cache,
    search_cache_key,
    details_cache_key,
    walking_cache_key,
)


def age_entry(key, seconds):
    entry = CacheEntry.query.filter_by(key=key).first()
    entry.created_at = datetime.utcnow() - timedelta(seconds=seconds)
    db.session.commit()


class TestRestaurantCache:

    def test_missing_key_is_absent(self, app):
        assert restaurant_cache.get('places-search:nothing', 3600) is None

    def test_set_then_get(self, app):
        restaurant_cache.set('k', [{'place_id': 'abc'}])
        assert restaurant_cache.get('k', 3600) == [{'place_id': 'abc'}]

    def test_expired_entry_is_absent_and_removed(self, app):
        restaurant_cache.set('k', {'a': 1})
        age_entry('k', 3601)

        assert restaurant_cache.get('k', 3600) is None
        assert CacheEntry.query.filter_by(key='k').count() == 0

    def test_entry_within_ttl_is_served(self, app):
        restaurant_cache.set('k', {'a': 1})
        age_entry('k', 3000)

        assert restaurant_cache.get('k', 3600) == {'a': 1}

    def test_same_entry_fresh_for_longer_ttl(self, app):
        restaurant_cache.set('details', {'name': 'Alpha'})
        age_entry('details', 2 * 3600)

        assert restaurant_cache.get('details', 24 * 3600) == {'name': 'Alpha'}

    def test_set_replaces_value_and_resets_age(self, app):
        restaurant_cache.set('k', 'old')
        age_entry('k', 3500)
        restaurant_cache.set('k', 'new')
        age = datetime.utcnow() - CacheEntry.query.filter_by(key="k").first().created_at

        assert restaurant_cache.get('k', 3600) == 'new'
        assert age < timedelta(seconds=60)
        assert CacheEntry.query.count() == 1

    def test_cleanup_expired(self, app):
        restaurant_cache.set('old', 1)
        restaurant_cache.set('fresh', 2)
        age_entry('old', 7200)

        assert CacheEntry.cleanup_expired(3600) == 1
        assert restaurant_cache.get('fresh', 3600) == 2


class TestCacheKeys:

    def test_search_key_uses_every_parameter(self):
        key = search_cache_key(40.76, -111.89, 1500, 'restaurant', 'thai', 1, 3, True)
        assert key == 'places-search:40.76--111.89-1500-restaurant-thai-1-3-True'

    def test_search_key_differs_per_parameter(self):
        base = search_cache_key(40.76, -111.89, 1500, 'restaurant', '', None, None, True)
        assert base != search_cache_key(40.76, -111.89, 1500, 'restaurant', '', None, None, False)
        assert base != search_cache_key(40.76, -111.89, 2000, 'restaurant', '', None, None, True)
        assert base != search_cache_key(40.76, -111.89, 1500, 'restaurant', '', None, 2, True)

    def test_search_key_is_deterministic(self):
        args = (40.76, -111.89, 1500, 'restaurant', 'pizza', None, 4, False)
        assert search_cache_key(*args) == search_cache_key(*args)

    def test_details_and_walking_keys(self):
        assert details_cache_key('abc') == 'place-details:abc'
        assert walking_cache_key(1, 2, 3, 4) == 'walking-distance:1-2-3-4'
