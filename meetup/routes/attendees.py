"""
Attendee routes - joining and leaving dinner groups.

All routes act on the signed-in user; a user is in at most one group.
"""

from flask import Blueprint, request, jsonify

from meetup.errors import ValidationError
from meetup.routes.auth import login_required, get_current_user_id
from meetup.routes.params import request_data
from meetup.services.membership_service import membership_service

attendees_bp = Blueprint('attendees', __name__, url_prefix='/api/attendees')


@attendees_bp.route('')
@login_required
def list_attendance():
    """The signed-in user's attendee rows with group and restaurant."""
    rows = membership_service.memberships(get_current_user_id())
    items = []
    for attendee in rows:
        data = attendee.to_dict()
        data['dinner_group'] = attendee.dinner_group.to_dict(include_attendees=False)
        items.append(data)
    return jsonify({
        'success': True,
        'attendees': items
    })


@attendees_bp.route('/current')
@login_required
def current_group():
    """The signed-in user's dinner group, or null."""
    group = membership_service.current_group(get_current_user_id())
    return jsonify({
        'success': True,
        'current_dinner_group': group.to_dict() if group else None
    })


@attendees_bp.route('/count')
@login_required
def attendee_count():
    """
    Number of attendees in a dinner group.

    Query params:
        dinnerGroupId: Dinner group id (required)
    """
    group_id = request.args.get('dinnerGroupId')
    count = membership_service.attendee_count(group_id)
    return jsonify({
        'success': True,
        'count': count
    })


@attendees_bp.route('/join', methods=['POST'])
@login_required
def join():
    """
    Join a dinner group, leaving any other one.

    Body (form or JSON), one of:
        restaurantId: Join the group for this restaurant (created if needed)
        dinnerGroupId: Join this existing group
    """
    data = request_data(request)
    user_id = get_current_user_id()

    if data.get('restaurantId'):
        attendee = membership_service.join(user_id, data['restaurantId'])
    elif data.get('dinnerGroupId'):
        attendee = membership_service.join_group(user_id, data['dinnerGroupId'])
    else:
        raise ValidationError('Restaurant ID or dinner group ID is required')

    result = attendee.to_dict()
    result['dinner_group'] = attendee.dinner_group.to_dict(include_attendees=False)
    return jsonify({
        'success': True,
        'attendee': result
    })


@attendees_bp.route('/leave', methods=['POST'])
@login_required
def leave():
    """Leave the current dinner group. 'left' is false if there was none."""
    left = membership_service.leave(get_current_user_id())
    return jsonify({
        'success': True,
        'left': left
    })
