# Import all models here so they're registered with SQLAlchemy
from meetup.models.user import User
from meetup.models.restaurant import Restaurant
from meetup.models.dinner_group import DinnerGroup
from meetup.models.attendee import Attendee
from meetup.models.cache_entry import CacheEntry

__all__ = ['User', 'Restaurant', 'DinnerGroup', 'Attendee', 'CacheEntry']
