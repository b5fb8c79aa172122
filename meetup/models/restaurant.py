from datetime import datetime
from meetup import db


class Restaurant(db.Model):
    """Restaurant sourced from the place-search provider.

    The primary key is the provider's place identifier, so repeated
    searches refresh the same row instead of creating duplicates.
    """
    __tablename__ = 'restaurants'

    id = db.Column(db.String(255), primary_key=True)  # external place id
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(300), nullable=False, default='')
    cuisine_type = db.Column(db.String(50), nullable=False, default='Restaurant')
    price_level = db.Column(db.Integer, nullable=False, default=2)  # 1-4
    rating = db.Column(db.Float, nullable=False, default=0.0)
    lat = db.Column(db.Float, nullable=False)
    lng = db.Column(db.Float, nullable=False)
    photo_url = db.Column(db.String(1000), nullable=True)
    maps_url = db.Column(db.String(500), nullable=True)
    website_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    dinner_group = db.relationship('DinnerGroup', backref='restaurant', uselist=False,
                                   cascade='all, delete-orphan')

    UPDATABLE_FIELDS = (
        'name', 'address', 'cuisine_type', 'price_level', 'rating',
        'lat', 'lng', 'photo_url', 'maps_url', 'website_url',
    )

    def __repr__(self):
        return f'<Restaurant {self.name}>'

    @classmethod
    def upsert(cls, data: dict):
        """
        Create or refresh a restaurant from a normalized place record.

        Args:
            data: dict in the shape produced by normalize_place(), must carry 'id'

        Returns:
            The Restaurant row (added to the session, not committed)
        """
        restaurant = db.session.get(cls, data['id'])
        if restaurant is None:
            restaurant = cls(id=data['id'])
            db.session.add(restaurant)
        for field in cls.UPDATABLE_FIELDS:
            if field in data:
                setattr(restaurant, field, data[field])
        return restaurant

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'cuisine_type': self.cuisine_type,
            'price_level': self.price_level,
            'rating': self.rating,
            'lat': self.lat,
            'lng': self.lng,
            'photo_url': self.photo_url,
            'maps_url': self.maps_url,
            'website_url': self.website_url,
        }
