"""
Membership catalog service.
"""
import logging

from sqlalchemy import exists, func, or_, select
from sqlalchemy.exc import IntegrityError

from gym_api.errors import ConflictError, NotFoundError, ValidationError
from gym_api.models.membership import Membership
from gym_api.models.subscription import Subscription
from gym_api.utils.validation import parse_bool, parse_decimal, parse_int, parse_str

logger = logging.getLogger(__name__)

FLAG_FIELDS = ('has_coach', 'has_workout_plan', 'has_nutrition_plan', 'is_active')
EDITABLE_FIELDS = frozenset(('name', 'description', 'price', 'duration_days') + FLAG_FIELDS)


class MembershipCatalog:
    """
    CRUD over the membership catalog.

    A membership referenced by any subscription cannot be deleted; retire it
    by clearing ``is_active`` instead.
    """

    def __init__(self, session):
        self.session = session

    def list(self, active_only=False, search=None):
        """
        Catalog entries ordered by price, cheapest first.

        Args:
            active_only (bool): Only memberships currently on sale
            search (str, optional): Substring matched against name and description

        Returns:
            list: Memberships
        """
        stmt = select(Membership)
        if active_only:
            stmt = stmt.where(Membership.is_active.is_(True))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Membership.name.ilike(pattern),
                                  Membership.description.ilike(pattern)))
        stmt = stmt.order_by(Membership.price.asc(), Membership.id.asc())
        return list(self.session.scalars(stmt))

    def get(self, membership_id):
        membership = self.session.get(Membership, parse_int(membership_id, 'membership_id'))
        if membership is None:
            raise NotFoundError(f"Membership {membership_id} not found")
        return membership

    def create(self, **fields):
        """
        Add a membership to the catalog.

        Raises:
            ValidationError: Missing name, price or duration, or bad values
        """
        data = self._clean(fields, partial=False)
        membership = Membership(**data)
        self.session.add(membership)
        self._commit()
        logger.info("Created membership %s (%s)", membership.id, membership.name)
        return membership

    def update(self, membership_id, **fields):
        """
        Edit a membership.

        Subscriptions keep the price and duration recorded when they were
        created, so edits never change history.
        """
        membership = self.get(membership_id)
        for key, value in self._clean(fields, partial=True).items():
            setattr(membership, key, value)
        self._commit()
        logger.info("Updated membership %s", membership.id)
        return membership

    def delete(self, membership_id):
        """
        Remove a membership that no subscription references.

        Raises:
            ConflictError: At least one subscription references the membership
        """
        membership = self.get(membership_id)
        referenced = self.session.scalar(
            select(exists().where(Subscription.membership_id == membership.id))
        )
        if referenced:
            raise ConflictError("Cannot delete a membership that has subscriptions. Deactivate it instead.")
        self.session.delete(membership)
        self._commit()
        logger.info("Deleted membership %s", membership_id)

    def stats(self):
        """Catalog counts and active-subscription revenue per membership."""
        total = self.session.scalar(select(func.count(Membership.id))) or 0
        active = self.session.scalar(
            select(func.count(Membership.id)).where(Membership.is_active.is_(True))
        ) or 0

        active_subs = func.count(Subscription.id)
        # Sum of the prices recorded on each subscription
        revenue = func.coalesce(func.sum(Subscription.price), 0)
        rows = self.session.execute(
            select(Membership, active_subs, revenue)
            .outerjoin(Subscription, (Subscription.membership_id == Membership.id)
                       & Subscription.is_active.is_(True))
            .group_by(Membership.id)
            .order_by(Membership.price.asc(), Membership.id.asc())
        ).all()

        return {
            'total': total,
            'active': active,
            'inactive': total - active,
            'revenue_by_membership': [
                {
                    'id': membership.id,
                    'name': membership.name,
                    'subscriptions_count': count,
                    'total_revenue': float(revenue_total),
                }
                for membership, count, revenue_total in rows
            ],
        }

    def _clean(self, fields, partial):
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unsupported fields: {', '.join(sorted(unknown))}")
        if not partial:
            missing = [k for k in ('name', 'price', 'duration_days') if fields.get(k) is None]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        data = {}
        if 'name' in fields:
            data['name'] = parse_str(fields['name'], 'name', max_length=100, required=True)
        if 'description' in fields:
            data['description'] = parse_str(fields['description'], 'description')
        if 'price' in fields:
            data['price'] = parse_decimal(fields['price'], 'price', minimum=0)
        if 'duration_days' in fields:
            data['duration_days'] = parse_int(fields['duration_days'], 'duration_days', minimum=1)
        for flag in FLAG_FIELDS:
            if flag in fields and fields[flag] is not None:
                data[flag] = parse_bool(fields[flag], flag)
        return data

    def _commit(self):
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Integrity error on membership write: %s", e.orig)
            raise ConflictError("Membership conflicts with existing data")
