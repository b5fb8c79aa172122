"""
Dinner group routes.

Groups are normally created by the first join to a restaurant; these
endpoints let organizers inspect them and attach notes.
"""

from flask import Blueprint, request, jsonify

from meetup.routes.auth import login_required
from meetup.routes.params import request_data
from meetup.services.membership_service import membership_service

dinner_groups_bp = Blueprint('dinner_groups', __name__, url_prefix='/api/dinner-groups')


@dinner_groups_bp.route('')
@login_required
def list_groups():
    """All dinner groups with restaurant and roster."""
    groups = membership_service.list_groups()
    return jsonify({
        'success': True,
        'dinner_groups': [g.to_dict() for g in groups]
    })


@dinner_groups_bp.route('/<group_id>')
@login_required
def get_group(group_id):
    group = membership_service.get_group(group_id)
    return jsonify({
        'success': True,
        'dinner_group': group.to_dict()
    })


@dinner_groups_bp.route('', methods=['POST'])
@login_required
def create_group():
    """
    Get or create the dinner group for a restaurant.

    Body (form or JSON):
        restaurantId: Restaurant (place) id (required)
        notes: Optional free-text note
    """
    data = request_data(request)
    group = membership_service.create_group(data.get('restaurantId'), notes=data.get('notes'))
    return jsonify({
        'success': True,
        'dinner_group': group.to_dict()
    })


@dinner_groups_bp.route('/<group_id>', methods=['PATCH'])
@login_required
def update_group(group_id):
    data = request_data(request)
    group = membership_service.update_group(group_id, notes=data.get('notes'))
    return jsonify({
        'success': True,
        'dinner_group': group.to_dict()
    })


@dinner_groups_bp.route('/<group_id>', methods=['DELETE'])
@login_required
def delete_group(group_id):
    membership_service.delete_group(group_id)
    return jsonify({'success': True})
