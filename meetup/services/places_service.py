"""
Google Places API integration for Conference Dinner Meetup.

Uses the Google Maps web services for:
- Nearby Search (restaurants around the attendee)
- Place Details (full info for a single place)
- Distance Matrix (walking distance and time)

Responses are memoized in the restaurant cache. Any network, HTTP or parse
failure is logged and degrades to an empty result.

Requires: GOOGLE_PLACES_API_KEY environment variable
"""

import math
import uuid
from typing import Optional

import requests
from flask import current_app

from meetup.services.cache_service import (
    restaurant_cache,
    search_cache_key,
    details_cache_key,
    walking_cache_key,
)

DEFAULT_PRICE_LEVEL = 2  # mid tier on the 1-4 scale
DEFAULT_RATING = 0.0
DEFAULT_CUISINE = 'Restaurant'

# Map place types to a cuisine label
CUISINE_MAP = {
    'restaurant': 'Restaurant',
    'cafe': 'Cafe',
    'bar': 'Bar & Grill',
    'bakery': 'Bakery',
    'meal_takeaway': 'Takeout',
    'meal_delivery': 'Delivery',
    'american_restaurant': 'American',
    'italian_restaurant': 'Italian',
    'mexican_restaurant': 'Mexican',
    'chinese_restaurant': 'Chinese',
    'japanese_restaurant': 'Japanese',
    'thai_restaurant': 'Thai',
    'indian_restaurant': 'Indian',
    'pizza_restaurant': 'Pizza',
    'seafood_restaurant': 'Seafood',
    'steak_house': 'Steakhouse',
    'hamburger_restaurant': 'Burgers',
    'sandwich_shop': 'Sandwiches',
}

# Generic tags that say nothing about the food
IGNORED_TYPES = {'point_of_interest', 'establishment', 'food', 'store'}


def cuisine_from_types(types) -> str:
    """Pick a cuisine label from a place's category tags."""
    for place_type in types or []:
        if place_type in IGNORED_TYPES:
            continue
        return CUISINE_MAP.get(place_type, place_type.replace('_', ' ').title())
    return DEFAULT_CUISINE


def _coordinate(value) -> Optional[float]:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def normalize_place(raw: dict, photo_url_builder=None) -> Optional[dict]:
    """
    Map a provider place record to the fixed restaurant shape.

    Missing optional fields are defaulted rather than passed on as None:
    price level falls back to the mid tier and rating to 0.0. Places with
    no stable id get an ephemeral 'temp-' id and are flagged so callers do
    not persist them.

    Args:
        raw: Place record as returned by the provider
        photo_url_builder: Callable turning a photo reference into a URL

    Returns:
        dict in the Restaurant shape, or None if the place has no usable geometry
    """
    if not isinstance(raw, dict):
        return None

    location = ((raw.get('geometry') or {}).get('location') or {})
    lat = _coordinate(location.get('lat'))
    lng = _coordinate(location.get('lng'))
    if lat is None or lng is None:
        return None

    place_id = raw.get('place_id')
    ephemeral = not place_id
    if ephemeral:
        place_id = f"temp-{uuid.uuid4()}"

    price_level = raw.get('price_level')
    # bool is an int subclass; a stray true must not read as tier 1
    if isinstance(price_level, bool) or not isinstance(price_level, int) or not 1 <= price_level <= 4:
        price_level = DEFAULT_PRICE_LEVEL

    rating = raw.get('rating')
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        rating = DEFAULT_RATING
    rating = float(rating)

    photo_url = None
    photos = raw.get('photos') or []
    if photos and photo_url_builder:
        reference = (photos[0] or {}).get('photo_reference')
        if reference:
            photo_url = photo_url_builder(reference)

    return {
        'id': place_id,
        'ephemeral': ephemeral,
        'name': raw.get('name') or 'Unnamed restaurant',
        'address': raw.get('vicinity') or raw.get('formatted_address') or '',
        'cuisine_type': cuisine_from_types(raw.get('types')),
        'price_level': price_level,
        'rating': rating,
        'lat': lat,
        'lng': lng,
        'photo_url': photo_url,
        'maps_url': raw.get('url') or None,
        'website_url': raw.get('website') or None,
    }


class PlacesService:
    """Service for Google Places API interactions."""

    # Google Maps web service endpoints
    NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
    PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
    DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"

    DETAILS_FIELDS = 'place_id,name,vicinity,type,price_level,rating,geometry,photos,website,url'

    # Statuses that mean the request itself worked
    OK_STATUSES = ('OK', 'ZERO_RESULTS')

    @property
    def api_key(self):
        return current_app.config.get('GOOGLE_PLACES_API_KEY')

    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key)

    def photo_url(self, photo_reference: str, max_width: int = 400) -> str:
        """Build a photo URL from a photo reference."""
        return (
            f"{self.PHOTO_URL}?maxwidth={max_width}"
            f"&photoreference={photo_reference}&key={self.api_key}"
        )

    def _get_json(self, url: str, params: dict, label: str):
        """GET a Maps web service endpoint, returning (data, error)."""
        try:
            response = requests.get(url, params=params, timeout=10)
        except requests.exceptions.Timeout:
            current_app.logger.error(f"{label} API timeout")
            return None, 'Request timed out'
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f"{label} API exception: {e}")
            return None, str(e)

        if response.status_code != 200:
            current_app.logger.error(f"{label} API error: {response.status_code} - {response.text}")
            return None, f'API error: {response.status_code}'

        try:
            data = response.json()
        except ValueError as e:
            current_app.logger.error(f"{label} API returned invalid JSON: {e}")
            return None, 'Invalid response'

        if not isinstance(data, dict):
            current_app.logger.error(f"{label} API returned unexpected payload")
            return None, 'Invalid response'

        status = data.get('status', 'OK')
        if status not in self.OK_STATUSES:
            message = data.get('error_message', '')
            current_app.logger.error(f"{label} API status {status}: {message}")
            return None, f'API status: {status}'

        return data, None

    def search_restaurants(self, lat: float, lng: float, radius: float = 1500,
                           place_type: str = 'restaurant', keyword: str = '',
                           min_price: Optional[int] = None, max_price: Optional[int] = None,
                           open_now: bool = True, force_refresh: bool = False) -> dict:
        """
        Search for restaurants near a point.

        Args:
            lat, lng: Search centre
            radius: Search radius in metres
            place_type: Place type filter (default 'restaurant')
            keyword: Optional free-text keyword (e.g., a cuisine)
            min_price, max_price: Optional price bounds (0-4)
            open_now: Only return places open now
            force_refresh: Skip the cache read

        Returns:
            dict with 'success', 'places' (raw provider records), and 'error' (if failed)
        """
        if not self.api_key:
            return {
                'success': False,
                'places': [],
                'error': 'Google Places API key not configured'
            }

        cache_key = search_cache_key(lat, lng, radius, place_type, keyword,
                                     min_price, max_price, open_now)
        ttl = current_app.config.get('SEARCH_CACHE_TTL', 3600)

        if not force_refresh:
            cached = restaurant_cache.get(cache_key, ttl)
            if cached is not None:
                return {
                    'success': True,
                    'places': cached,
                    'error': None
                }

        params = {
            'location': f'{lat},{lng}',
            'radius': str(radius),
            'type': place_type,
            'key': self.api_key,
        }
        if keyword:
            params['keyword'] = keyword
        if min_price is not None:
            params['minprice'] = str(min_price)
        if max_price is not None:
            params['maxprice'] = str(max_price)
        if open_now:
            params['opennow'] = 'true'

        data, error = self._get_json(self.NEARBY_SEARCH_URL, params, 'Places Search')
        if error:
            return {
                'success': False,
                'places': [],
                'error': error
            }

        results = data.get('results', [])
        if not isinstance(results, list):
            current_app.logger.error("Places Search API returned non-list results")
            return {
                'success': False,
                'places': [],
                'error': 'Invalid response'
            }

        restaurant_cache.set(cache_key, results)

        return {
            'success': True,
            'places': results,
            'error': None
        }

    def get_place_details(self, place_id: str) -> dict:
        """
        Get detailed information about a place.

        Args:
            place_id: Google Place ID

        Returns:
            dict with 'success', 'place' (raw provider record), and 'error' (if failed)
        """
        if not self.api_key:
            return {
                'success': False,
                'place': None,
                'error': 'Google Places API key not configured'
            }

        if not place_id:
            return {
                'success': False,
                'place': None,
                'error': 'Place ID required'
            }

        cache_key = details_cache_key(place_id)
        ttl = current_app.config.get('DETAILS_CACHE_TTL', 86400)

        cached = restaurant_cache.get(cache_key, ttl)
        if cached is not None:
            return {
                'success': True,
                'place': cached,
                'error': None
            }

        params = {
            'place_id': place_id,
            'fields': self.DETAILS_FIELDS,
            'key': self.api_key,
        }
        data, error = self._get_json(self.DETAILS_URL, params, 'Places Details')
        if error:
            return {
                'success': False,
                'place': None,
                'error': error
            }

        place = data.get('result')
        if not isinstance(place, dict):
            return {
                'success': False,
                'place': None,
                'error': 'Place not found'
            }
        place.setdefault('place_id', place_id)

        restaurant_cache.set(cache_key, place)

        return {
            'success': True,
            'place': place,
            'error': None
        }

    def get_walking_distance(self, origin_lat: float, origin_lng: float,
                             dest_lat: float, dest_lng: float) -> dict:
        """
        Get walking distance and duration between two points.

        Returns:
            dict with 'success', 'distance' ({'distance': {...}, 'duration': {...}}),
            and 'error' (if failed)
        """
        if not self.api_key:
            return {
                'success': False,
                'distance': None,
                'error': 'Google Places API key not configured'
            }

        cache_key = walking_cache_key(origin_lat, origin_lng, dest_lat, dest_lng)
        ttl = current_app.config.get('DETAILS_CACHE_TTL', 86400)

        cached = restaurant_cache.get(cache_key, ttl)
        if cached is not None:
            return {
                'success': True,
                'distance': cached,
                'error': None
            }

        params = {
            'origins': f'{origin_lat},{origin_lng}',
            'destinations': f'{dest_lat},{dest_lng}',
            'mode': 'walking',
            'key': self.api_key,
        }
        data, error = self._get_json(self.DISTANCE_MATRIX_URL, params, 'Distance Matrix')
        if error:
            return {
                'success': False,
                'distance': None,
                'error': error
            }

        try:
            element = data['rows'][0]['elements'][0]
        except (KeyError, IndexError, TypeError):
            current_app.logger.error("Distance Matrix API returned no elements")
            return {
                'success': False,
                'distance': None,
                'error': 'Invalid response'
            }

        result = {
            'distance': element.get('distance'),
            'duration': element.get('duration'),
        }
        restaurant_cache.set(cache_key, result)

        return {
            'success': True,
            'distance': result,
            'error': None
        }


# Singleton instance
places_service = PlacesService()
