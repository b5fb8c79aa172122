import uuid
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from meetup import db


def generate_id():
    return str(uuid.uuid4())


class DinnerGroup(db.Model):
    """The one dinner group for a restaurant, created on first join."""
    __tablename__ = 'dinner_groups'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    restaurant_id = db.Column(
        db.String(255),
        db.ForeignKey('restaurants.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,  # at most one group per restaurant
    )
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    attendees = db.relationship('Attendee', backref='dinner_group', order_by='Attendee.created_at',
                                cascade='all, delete-orphan')

    def __repr__(self):
        return f'<DinnerGroup restaurant={self.restaurant_id}>'

    @classmethod
    def get_or_create_for_restaurant(cls, restaurant_id, notes=None):
        """
        Look up the group for a restaurant, creating it if none exists.

        The unique constraint on restaurant_id decides concurrent creates:
        the loser's insert fails and it re-reads the winner's row.

        Returns:
            tuple: (group: DinnerGroup, created: bool)
        """
        group = cls.query.filter_by(restaurant_id=restaurant_id).first()
        if group:
            return group, False

        group = cls(restaurant_id=restaurant_id, notes=notes)
        db.session.add(group)
        try:
            db.session.flush()
        except IntegrityError:
            db.session.rollback()
            return cls.query.filter_by(restaurant_id=restaurant_id).one(), False
        return group, True

    @property
    def attendee_count(self):
        return len(self.attendees)

    def to_dict(self, include_attendees=True):
        data = {
            'id': self.id,
            'restaurant_id': self.restaurant_id,
            'notes': self.notes,
            'restaurant': self.restaurant.to_dict() if self.restaurant else None,
            'attendee_count': self.attendee_count,
        }
        if include_attendees:
            data['attendees'] = [a.to_dict() for a in self.attendees]
        return data
