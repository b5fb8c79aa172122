# Business logic services
from meetup.services.cache_service import restaurant_cache
from meetup.services.places_service import places_service, normalize_place
from meetup.services.membership_service import membership_service
from meetup.services.aggregation_service import build_restaurant_cards

__all__ = [
    'restaurant_cache',
    'places_service',
    'normalize_place',
    'membership_service',
    'build_restaurant_cards',
]
