from datetime import datetime
from flask import Blueprint, request, jsonify, current_app

from meetup.routes.auth import login_required, get_current_user
from meetup.routes.params import float_arg, int_arg
from meetup.services.membership_service import membership_service

main_bp = Blueprint('main', __name__)


def get_dinner_time(now=None):
    """Today's dinner cutoff (DINNER_HOUR:00 local time)."""
    now = now or datetime.now()
    return now.replace(hour=current_app.config['DINNER_HOUR'], minute=0, second=0, microsecond=0)


@main_bp.route('/health')
def health():
    """Health check endpoint for Railway."""
    return {'status': 'healthy', 'app': 'Conference Dinner Meetup'}


@main_bp.route('/dashboard')
@login_required
def dashboard():
    """Dashboard state: user, current group, filters and the dinner cutoff."""
    user = get_current_user()
    group = membership_service.current_group(user.id) if user else None
    args = request.args

    dinner_time = get_dinner_time()
    seconds_left = max(0, int((dinner_time - datetime.now()).total_seconds()))

    return jsonify({
        'success': True,
        'user': user.to_dict() if user else None,
        'current_dinner_group': group.to_dict(include_attendees=False) if group else None,
        'filters': {
            'view_mode': args.get('viewMode') or 'list',
            'distance': float_arg(args, 'distance', 10),  # miles
            'rating': float_arg(args, 'rating', 0),
            'price_range': int_arg(args, 'priceRange', 0),
            'cuisine_type': args.get('cuisineType', ''),
        },
        'venue_location': {
            'lat': current_app.config['VENUE_LAT'],
            'lng': current_app.config['VENUE_LNG'],
        },
        'dinner_time': dinner_time.isoformat(),
        'seconds_until_dinner': seconds_left,
    })
