from datetime import datetime
from meetup import db
from meetup.models.dinner_group import generate_id


class Attendee(db.Model):
    """Membership of a user in a dinner group."""
    __tablename__ = 'attendees'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    dinner_group_id = db.Column(
        db.String(36),
        db.ForeignKey('dinner_groups.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # A user is in at most one dinner group
    __table_args__ = (
        db.UniqueConstraint('user_id', name='unique_attendee_user'),
        db.UniqueConstraint('user_id', 'dinner_group_id', name='unique_attendee_group'),
    )

    def __repr__(self):
        return f'<Attendee user={self.user_id} group={self.dinner_group_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'dinner_group_id': self.dinner_group_id,
            'user': self.user.to_dict() if self.user else None,
        }
