"""
API routes for restaurant search and place lookups.

Includes:
- Restaurant search with attendee counts (dashboard cards)
- Stored restaurant listing and creation from a place id
- Google Places details and walking distance
"""

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from meetup import db
from meetup.errors import ValidationError, NotFoundError, OperationFailedError
from meetup.models import Restaurant
from meetup.routes.auth import login_required, get_current_user_id
from meetup.routes.params import request_data, float_arg, int_arg, bool_arg
from meetup.services.places_service import places_service, normalize_place
from meetup.services.membership_service import membership_service
from meetup.services.aggregation_service import build_restaurant_cards, DEFAULT_RADIUS
from meetup.services.geo import miles_to_meters

api_bp = Blueprint('api', __name__, url_prefix='/api')


def search_radius(args):
    """Radius in metres from 'radius' (metres) or 'distance' (miles)."""
    radius = float_arg(args, 'radius')
    if radius:
        return radius
    miles = float_arg(args, 'distance')
    if miles:
        return miles_to_meters(miles)
    return DEFAULT_RADIUS


@api_bp.route('/restaurants/search')
@login_required
def search_restaurants():
    """
    Search for restaurants near a point.

    Query params:
        lat, lng: Search centre (required)
        radius: Radius in metres, or distance: radius in miles (default 1500 m)
        type, keyword: Provider filters
        minPrice, maxPrice: Price bounds (0-4)
        minRating: Drop restaurants rated below this
        openNow: Only open restaurants (default true)
        forceRefresh: Skip cached results

    Returns:
        JSON with 'success' and 'restaurants' cards
    """
    args = request.args
    cards = build_restaurant_cards(
        get_current_user_id(),
        float_arg(args, 'lat', required=True),
        float_arg(args, 'lng', required=True),
        radius=search_radius(args),
        place_type=args.get('type') or 'restaurant',
        keyword=args.get('keyword', '').strip(),
        min_price=int_arg(args, 'minPrice'),
        max_price=int_arg(args, 'maxPrice'),
        min_rating=float_arg(args, 'minRating'),
        open_now=bool_arg(args, 'openNow', True),
        force_refresh=bool_arg(args, 'forceRefresh'),
    )
    return jsonify({
        'success': True,
        'restaurants': cards
    })


@api_bp.route('/restaurants')
@login_required
def list_restaurants():
    """List stored restaurants with their dinner group and attendee count."""
    restaurants = Restaurant.query.order_by(Restaurant.name).all()
    groups = membership_service.counts_by_restaurant([r.id for r in restaurants])

    items = []
    for restaurant in restaurants:
        group = groups.get(restaurant.id)
        data = restaurant.to_dict()
        data['dinner_group_id'] = group['dinner_group_id'] if group else None
        data['attendee_count'] = group['attendee_count'] if group else 0
        items.append(data)

    return jsonify({
        'success': True,
        'restaurants': items
    })


@api_bp.route('/restaurants', methods=['POST'])
@login_required
def create_restaurant():
    """
    Store a restaurant from its Google Place ID.

    Body (form or JSON):
        placeId: Google Place ID (required)
    """
    place_id = (request_data(request).get('placeId') or '').strip()
    if not place_id:
        raise ValidationError('Place ID is required')

    result = places_service.get_place_details(place_id)
    if not result['success']:
        raise NotFoundError(f"Place details unavailable: {result['error']}")

    place = normalize_place(result['place'], photo_url_builder=places_service.photo_url)
    if place is None:
        raise ValidationError('Place has no location')
    if place['ephemeral']:
        raise ValidationError('Place has no stable identifier')

    try:
        restaurant = Restaurant.upsert(place)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Saving restaurant {place_id} failed: {e}")
        raise OperationFailedError('Failed to save restaurant') from e

    return jsonify({
        'success': True,
        'restaurant': restaurant.to_dict()
    }), 201


@api_bp.route('/places/status')
def places_status():
    """Check if Google Places API is configured."""
    return jsonify({
        'configured': places_service.is_configured()
    })


@api_bp.route('/places/walking-distance')
@login_required
def walking_distance():
    """
    Walking distance and time between two points.

    Query params:
        originLat, originLng, destLat, destLng (all required)
    """
    args = request.args
    result = places_service.get_walking_distance(
        float_arg(args, 'originLat', required=True),
        float_arg(args, 'originLng', required=True),
        float_arg(args, 'destLat', required=True),
        float_arg(args, 'destLng', required=True),
    )
    return jsonify(result)


@api_bp.route('/places/<place_id>')
@login_required
def get_place_details(place_id):
    """
    Get detailed information about a place.

    Returns:
        JSON with 'success', 'place' (normalized), and 'error' (if any)
    """
    result = places_service.get_place_details(place_id)
    if result['success']:
        place = normalize_place(result['place'], photo_url_builder=places_service.photo_url)
        if place is None:
            result = {'success': False, 'place': None, 'error': 'Place has no location'}
        else:
            result['place'] = place
    return jsonify(result)
