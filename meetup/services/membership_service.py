"""
Dinner group membership.

A user belongs to at most one dinner group. Joining a restaurant's group
re-points the user's single attendee row (or creates it), so the previous
membership is replaced in the same transaction. Groups are created lazily,
one per restaurant, and are kept when their last attendee leaves.
"""

from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from meetup import db
from meetup.errors import AuthenticationRequired, ValidationError, NotFoundError, OperationFailedError
from meetup.models import User, Restaurant, DinnerGroup, Attendee


class MembershipService:
    """Join/leave logic and attendee counts."""

    # One retry covers a concurrent first join by the same user
    JOIN_ATTEMPTS = 2

    def _require_user(self, user_id):
        if not user_id:
            raise AuthenticationRequired()

    def _get_group(self, group_id) -> DinnerGroup:
        if not group_id:
            raise ValidationError('Dinner group ID is required')
        group = db.session.get(DinnerGroup, group_id)
        if group is None:
            raise NotFoundError('Dinner group not found')
        return group

    # ============== MEMBERSHIP ==============

    def join(self, user_id, restaurant_id) -> Attendee:
        """
        Put a user in the dinner group for a restaurant.

        Creates the group if the restaurant has none. Any previous membership
        of the user is replaced; nothing is written if the change fails.

        Args:
            user_id: Resolved user identity
            restaurant_id: External place id of a stored restaurant

        Returns:
            The user's Attendee row
        """
        self._require_user(user_id)
        if not restaurant_id:
            raise ValidationError('Restaurant ID is required')

        if db.session.get(User, user_id) is None:
            raise AuthenticationRequired('Unknown user')

        restaurant = db.session.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError('Restaurant not found')

        for attempt in range(1, self.JOIN_ATTEMPTS + 1):
            try:
                group, created = DinnerGroup.get_or_create_for_restaurant(restaurant_id)
                attendee = Attendee.query.filter_by(user_id=user_id).first()
                previous_group_id = attendee.dinner_group_id if attendee else None

                if attendee is None:
                    attendee = Attendee(user_id=user_id, dinner_group_id=group.id)
                    db.session.add(attendee)
                elif previous_group_id != group.id:
                    # Rosters are ordered by join time, so a move counts as a new join
                    attendee.dinner_group_id = group.id
                    attendee.created_at = datetime.utcnow()

                db.session.commit()
            except IntegrityError as e:
                db.session.rollback()
                if attempt == self.JOIN_ATTEMPTS:
                    current_app.logger.error(f"Join failed for user {user_id} at {restaurant_id}: {e}")
                    raise OperationFailedError('Failed to join dinner group') from e
                continue
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.error(f"Join failed for user {user_id} at {restaurant_id}: {e}")
                raise OperationFailedError('Failed to join dinner group') from e

            if created:
                current_app.logger.info(f"Created dinner group {group.id} for restaurant {restaurant_id}")
            current_app.logger.info(
                f"User {user_id} joined group {group.id} (previous group: {previous_group_id})"
            )
            return attendee

    def join_group(self, user_id, group_id) -> Attendee:
        """Join by dinner group id instead of restaurant id."""
        self._require_user(user_id)
        group = self._get_group(group_id)
        return self.join(user_id, group.restaurant_id)

    def leave(self, user_id) -> bool:
        """
        Remove the user from their dinner group.

        Returns:
            True if a membership was removed, False if there was none
        """
        self._require_user(user_id)

        attendee = Attendee.query.filter_by(user_id=user_id).first()
        if attendee is None:
            return False

        group_id = attendee.dinner_group_id
        try:
            db.session.delete(attendee)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Leave failed for user {user_id}: {e}")
            raise OperationFailedError('Failed to leave dinner group') from e

        current_app.logger.info(f"User {user_id} left group {group_id}")
        return True

    def current_group(self, user_id) -> Optional[DinnerGroup]:
        """The user's active dinner group (with restaurant and roster), or None."""
        self._require_user(user_id)
        attendee = Attendee.query.filter_by(user_id=user_id).first()
        return attendee.dinner_group if attendee else None

    def memberships(self, user_id):
        """All attendee rows for the user (at most one)."""
        self._require_user(user_id)
        return Attendee.query.filter_by(user_id=user_id).all()

    def attendee_count(self, group_id) -> int:
        """Number of attendees in a dinner group."""
        group = self._get_group(group_id)
        return Attendee.query.filter_by(dinner_group_id=group.id).count()

    def counts_by_restaurant(self, restaurant_ids) -> dict:
        """
        Group id and attendee count for each restaurant that has a group.

        Returns:
            dict mapping restaurant id to {'dinner_group_id', 'attendee_count'}
        """
        restaurant_ids = [rid for rid in restaurant_ids if rid]
        if not restaurant_ids:
            return {}

        rows = db.session.query(
            DinnerGroup.restaurant_id,
            DinnerGroup.id,
            func.count(Attendee.id),
        ).outerjoin(
            Attendee, Attendee.dinner_group_id == DinnerGroup.id
        ).filter(
            DinnerGroup.restaurant_id.in_(restaurant_ids)
        ).group_by(
            DinnerGroup.restaurant_id, DinnerGroup.id
        ).all()

        return {
            restaurant_id: {'dinner_group_id': group_id, 'attendee_count': count}
            for restaurant_id, group_id, count in rows
        }

    # ============== GROUP MANAGEMENT ==============

    def list_groups(self):
        return DinnerGroup.query.order_by(DinnerGroup.created_at).all()

    def get_group(self, group_id) -> DinnerGroup:
        return self._get_group(group_id)

    def create_group(self, restaurant_id, notes=None) -> DinnerGroup:
        """Get or create the group for a restaurant, setting its notes if given."""
        if not restaurant_id:
            raise ValidationError('Restaurant ID is required')
        if db.session.get(Restaurant, restaurant_id) is None:
            raise NotFoundError('Restaurant not found')

        try:
            group, created = DinnerGroup.get_or_create_for_restaurant(restaurant_id, notes=notes)
            if not created and notes is not None:
                group.notes = notes
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Creating dinner group for {restaurant_id} failed: {e}")
            raise OperationFailedError('Failed to create dinner group') from e
        return group

    def update_group(self, group_id, notes=None) -> DinnerGroup:
        group = self._get_group(group_id)
        group.notes = notes
        db.session.commit()
        return group

    def delete_group(self, group_id) -> None:
        """Delete a dinner group and its attendee rows."""
        group = self._get_group(group_id)
        db.session.delete(group)
        db.session.commit()
        current_app.logger.info(f"Deleted dinner group {group_id}")


# Singleton instance
membership_service = MembershipService()
