"""
Restaurant cards for the dinner dashboard.

Merges the provider's nearby restaurants with dinner group membership:
each card carries the restaurant's details, its distance and walking time
from the search centre, the attendee count of its group, and whether the
requesting user is the one attending. Cards keep the provider's order.
"""

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from meetup import db
from meetup.errors import AuthenticationRequired, ValidationError
from meetup.models import Restaurant
from meetup.services.places_service import places_service, normalize_place
from meetup.services.membership_service import membership_service
from meetup.services.geo import calculate_distance, calculate_walking_time

DEFAULT_RADIUS = 1500  # metres


def _persist(places):
    """Upsert places with a stable id; returns the ones that were stored."""
    stored = {p['id']: p for p in places if not p['ephemeral']}
    if not stored:
        return []
    try:
        for place in stored.values():
            Restaurant.upsert(place)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Restaurant upsert failed: {e}")
        return []
    return list(stored.values())


def build_restaurant_cards(user_id, lat, lng, radius=DEFAULT_RADIUS, place_type='restaurant',
                           keyword='', min_price=None, max_price=None, min_rating=None,
                           open_now=True, force_refresh=False):
    """
    Search around a point and build one card per restaurant.

    Args:
        user_id: Requesting user (required)
        lat, lng: Search centre
        radius: Search radius in metres
        place_type, keyword, min_price, max_price, open_now: Passed to the provider
        min_rating: Drop restaurants rated below this
        force_refresh: Bypass the cached search results

    Returns:
        list of card dicts; empty if the provider call failed
    """
    if not user_id:
        raise AuthenticationRequired()
    if lat is None or lng is None:
        raise ValidationError('Latitude and longitude are required')

    result = places_service.search_restaurants(
        lat, lng,
        radius=radius,
        place_type=place_type,
        keyword=keyword,
        min_price=min_price,
        max_price=max_price,
        open_now=open_now,
        force_refresh=force_refresh,
    )
    if not result['success']:
        current_app.logger.error(f"Restaurant search failed: {result['error']}")
        return []

    places = []
    for raw in result['places']:
        place = normalize_place(raw, photo_url_builder=places_service.photo_url)
        if place is None:
            continue
        if min_rating and place['rating'] < min_rating:
            continue
        places.append(place)

    stored_ids = {p['id'] for p in _persist(places)}
    groups = membership_service.counts_by_restaurant(list(stored_ids))

    current = membership_service.current_group(user_id)
    attending_restaurant_id = current.restaurant_id if current else None

    cards = []
    for place in places:
        distance = calculate_distance(lat, lng, place['lat'], place['lng'])
        group = groups.get(place['id']) if place['id'] in stored_ids else None
        card = {key: value for key, value in place.items() if key != 'ephemeral'}
        card.update({
            'distance_miles': round(distance, 2),
            'walking_time_minutes': calculate_walking_time(distance),
            'attendee_count': group['attendee_count'] if group else 0,
            'dinner_group_id': group['dinner_group_id'] if group else None,
            'user_is_attending': place['id'] == attending_restaurant_id,
        })
        cards.append(card)

    return cards
