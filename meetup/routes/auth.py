"""
User identity for API routes.

Sign-in is handled by the authentication collaborator, which stores the
resolved user id in session['user_id']. Routes here only read it.
"""

from functools import wraps
from flask import session

from meetup import db
from meetup.errors import AuthenticationRequired
from meetup.models import User


def get_current_user_id():
    """Get the id of the signed-in user, or None."""
    return session.get('user_id')


def get_current_user():
    """Get the signed-in user, or None."""
    user_id = get_current_user_id()
    if user_id:
        return db.session.get(User, user_id)
    return None


def login_required(f):
    """Decorator to require a resolved user identity."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_current_user_id():
            raise AuthenticationRequired()
        return f(*args, **kwargs)
    return decorated_function
