"""
Subscription lifecycle: creation, renewal, cancellation and reporting.
"""
import calendar
import logging
from datetime import date, timedelta

from sqlalchemy import and_, extract, func, or_, select, update
from sqlalchemy.exc import IntegrityError

from gym_api.errors import ConflictError, GymApiError, NotFoundError, ValidationError
from gym_api.models.base import utcnow
from gym_api.models.membership import Membership
from gym_api.models.subscription import (
    EXPIRING_SOON_DAYS,
    UPCOMING_RENEWAL_DAYS,
    Subscription,
    SubscriptionStatus,
)
from gym_api.models.user import User
from gym_api.utils.validation import parse_bool, parse_date, parse_int, parse_str

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(('start_date', 'end_date', 'notes', 'is_active'))


def status_filter(status, today, expiring_soon_days=EXPIRING_SOON_DAYS):
    """
    SQL criterion selecting subscriptions with the given derived status.

    Mirrors ``subscription_status`` so that listings, stats and the
    serialized status always agree.

    Args:
        status (SubscriptionStatus | str): Status to select
        today (date): Reference day
        expiring_soon_days (int): Size of the expiring-soon window

    Returns:
        SQLAlchemy expression
    """
    try:
        status = SubscriptionStatus(status)
    except ValueError:
        raise ValidationError(
            f"status must be one of: {', '.join(s.value for s in SubscriptionStatus)}")

    soon = today + timedelta(days=expiring_soon_days)
    if status is SubscriptionStatus.CANCELLED:
        return and_(Subscription.is_active.is_(False), Subscription.cancelled_at.isnot(None))
    if status is SubscriptionStatus.EXPIRED:
        return or_(
            and_(Subscription.is_active.is_(False), Subscription.cancelled_at.is_(None)),
            and_(Subscription.is_active.is_(True), Subscription.end_date < today),
        )
    if status is SubscriptionStatus.EXPIRING_SOON:
        return and_(Subscription.is_active.is_(True),
                    Subscription.end_date >= today,
                    Subscription.end_date <= soon)
    return and_(Subscription.is_active.is_(True), Subscription.end_date > soon)


class SubscriptionManager:
    """
    Owns the subscription lifecycle and its invariants.

    A member may hold at most one current subscription (active and not past
    its end date). Creation serializes on the member's user row with
    ``SELECT ... FOR UPDATE`` so two concurrent creates for the same member
    cannot both pass the check. Renew and cancel lock the subscription row
    they mutate.

    Args:
        session: SQLAlchemy session
        today (callable): Clock returning the current date
        expiring_soon_days (int): Window for the expiring_soon status
        upcoming_renewal_days (int): Window for renewal reporting
    """

    def __init__(self, session, today=date.today,
                 expiring_soon_days=EXPIRING_SOON_DAYS,
                 upcoming_renewal_days=UPCOMING_RENEWAL_DAYS):
        self.session = session
        self.today = today
        self.expiring_soon_days = expiring_soon_days
        self.upcoming_renewal_days = upcoming_renewal_days

    # -- lifecycle operations -------------------------------------------------

    def create(self, member_id, membership_id, start_date, end_date, notes=None):
        """
        Create a subscription for a member.

        Args:
            member_id (int): Member user ID
            membership_id (int): Membership ID
            start_date (date | str): First day
            end_date (date | str): Last day, strictly after start_date
            notes (str, optional): Free-text notes

        Returns:
            Subscription: The persisted subscription

        Raises:
            ValidationError: Malformed input or the user is not a member
            NotFoundError: Unknown member or membership
            ConflictError: The member already has a current subscription
        """
        member_id = parse_int(member_id, 'member_id')
        membership_id = parse_int(membership_id, 'membership_id')
        start_date = parse_date(start_date, 'start_date')
        end_date = parse_date(end_date, 'end_date')
        notes = parse_str(notes, 'notes')
        if start_date >= end_date:
            raise ValidationError("end_date must be after start_date")

        try:
            member = self._lock_member(member_id)
            if not member.is_member:
                raise ValidationError("Subscriptions can only be created for members")

            membership = self.session.get(Membership, membership_id)
            if membership is None:
                raise NotFoundError(f"Membership {membership_id} not found")
            if not membership.is_active:
                raise ValidationError("Cannot subscribe to an inactive membership")

            self._ensure_no_current(member_id)

            subscription = Subscription(
                member_id=member_id,
                membership_id=membership.id,
                start_date=start_date,
                end_date=end_date,
                is_active=True,
                price=membership.price,
                duration_days=membership.duration_days,
                notes=notes
            )
            self.session.add(subscription)
        except GymApiError:
            self.session.rollback()
            raise

        self._commit()
        logger.info("Created subscription %s for member %s (%s..%s)",
                    subscription.id, member_id, start_date, end_date)
        return subscription

    def renew(self, subscription_id, new_end_date=None, extension_days=None):
        """
        Push a subscription's end date forward and reactivate it.

        Exactly one of ``new_end_date`` and ``extension_days`` must be given.
        The end date never moves backwards.

        Returns:
            Subscription: The renewed subscription
        """
        if (new_end_date is None) == (extension_days is None):
            raise ValidationError("Provide exactly one of new_end_date or extension_days")
        if extension_days is not None:
            extension = timedelta(days=parse_int(extension_days, 'extension_days', minimum=1))
        else:
            new_end_date = parse_date(new_end_date, 'new_end_date')

        subscription = self._lock_subscription(subscription_id)
        if extension_days is not None:
            subscription.end_date = subscription.end_date + extension
        else:
            subscription.end_date = max(subscription.end_date, new_end_date)
        subscription.is_active = True
        subscription.cancelled_at = None

        self._commit()
        logger.info("Renewed subscription %s until %s", subscription.id, subscription.end_date)
        return subscription

    def cancel(self, subscription_id):
        """
        Cancel a subscription, ending it today.

        Cancelling an already cancelled subscription returns it unchanged.
        The end date becomes today once the subscription has started, also
        when it had already run out. A subscription that has not started
        keeps its dates so that start_date stays before end_date.

        Returns:
            Subscription: The cancelled subscription
        """
        subscription = self._lock_subscription(subscription_id)
        if subscription.status_on(self.today()) is SubscriptionStatus.CANCELLED:
            # Releases the row lock
            self.session.commit()
            return subscription

        today = self.today()
        subscription.is_active = False
        subscription.cancelled_at = utcnow()
        if subscription.start_date < today:
            subscription.end_date = today

        self._commit()
        logger.info("Cancelled subscription %s", subscription.id)
        return subscription

    def update(self, subscription_id, **changes):
        """
        Administrative edit of dates, notes and the active flag.

        Deactivating records a cancellation. If the edited row ends up
        current, no other current subscription may exist for the member.

        Returns:
            Subscription: The updated subscription
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unsupported fields: {', '.join(sorted(unknown))}")

        try:
            # Lock before any plain read so the conflict check sees the latest rows
            subscription = self._lock_subscription(subscription_id)
            self._lock_member(subscription.member_id)
            start_date = subscription.start_date
            end_date = subscription.end_date
            if 'start_date' in changes:
                start_date = parse_date(changes['start_date'], 'start_date')
            if 'end_date' in changes:
                end_date = parse_date(changes['end_date'], 'end_date')
            if start_date >= end_date:
                raise ValidationError("end_date must be after start_date")
            subscription.start_date = start_date
            subscription.end_date = end_date

            if 'notes' in changes:
                subscription.notes = parse_str(changes['notes'], 'notes')

            if 'is_active' in changes:
                is_active = parse_bool(changes['is_active'], 'is_active')
                if subscription.is_active and not is_active:
                    subscription.cancelled_at = utcnow()
                elif is_active:
                    subscription.cancelled_at = None
                subscription.is_active = is_active

            if subscription.is_current(self.today()):
                self._ensure_no_current(subscription.member_id, exclude_id=subscription.id)
        except GymApiError:
            self.session.rollback()
            raise

        self._commit()
        logger.info("Updated subscription %s (%s)", subscription.id, ', '.join(sorted(changes)))
        return subscription

    def delete(self, subscription_id):
        """Remove a subscription row."""
        subscription = self.get(subscription_id)
        self.session.delete(subscription)
        self._commit()
        logger.info("Deleted subscription %s", subscription_id)

    # -- queries --------------------------------------------------------------

    def get(self, subscription_id):
        """
        Fetch a subscription by ID.

        Raises:
            NotFoundError: Unknown subscription
        """
        subscription = self.session.get(Subscription, parse_int(subscription_id, 'subscription_id'))
        if subscription is None:
            raise NotFoundError(f"Subscription {subscription_id} not found")
        return subscription

    def get_status(self, subscription):
        """Derived status of ``subscription`` against the manager's clock."""
        return subscription.status_on(self.today(), self.expiring_soon_days)

    def list_expiring_within(self, days):
        """
        Active subscriptions ending between today and today + days inclusive.

        Returns:
            list: Subscriptions ordered by end date, soonest first
        """
        days = parse_int(days, 'days', minimum=0)
        today = self.today()
        stmt = (
            select(Subscription)
            .where(
                Subscription.is_active.is_(True),
                Subscription.end_date >= today,
                Subscription.end_date <= today + timedelta(days=days),
            )
            .order_by(Subscription.end_date.asc(), Subscription.id.asc())
        )
        return list(self.session.scalars(stmt))

    def list_for_member(self, member_id):
        """
        Full subscription history of a member, most recent first.

        Raises:
            NotFoundError: Unknown member
        """
        member_id = parse_int(member_id, 'member_id')
        if self.session.get(User, member_id) is None:
            raise NotFoundError(f"Member {member_id} not found")
        stmt = (
            select(Subscription)
            .where(Subscription.member_id == member_id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        return list(self.session.scalars(stmt))

    def current_for_member(self, member_id):
        """The member's current subscription, or None."""
        stmt = (
            select(Subscription)
            .where(Subscription.member_id == member_id, Subscription.is_current(self.today()))
            .order_by(Subscription.end_date.desc())
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    def query(self, status=None, membership_id=None, member_id=None):
        """
        Build a filtered select for paginated listings, newest first.

        Returns:
            Select: Statement over Subscription
        """
        stmt = select(Subscription)
        if status:
            stmt = stmt.where(status_filter(status, self.today(), self.expiring_soon_days))
        if membership_id is not None:
            stmt = stmt.where(Subscription.membership_id == parse_int(membership_id, 'membership_id'))
        if member_id is not None:
            stmt = stmt.where(Subscription.member_id == parse_int(member_id, 'member_id'))
        return stmt.order_by(Subscription.created_at.desc(), Subscription.id.desc())

    def stats(self):
        """
        Subscription counts by derived status plus reporting figures.

        Returns:
            dict: total, one count per status, upcoming_renewals, by_month
        """
        today = self.today()
        result = {'total': self._count()}
        for status in SubscriptionStatus:
            result[status.value] = self._count(status_filter(status, today, self.expiring_soon_days))
        result['upcoming_renewals'] = self._count(
            Subscription.is_active.is_(True),
            Subscription.end_date >= today,
            Subscription.end_date <= today + timedelta(days=self.upcoming_renewal_days),
        )
        result['by_month'] = self._created_by_month(today.year)
        return result

    def deactivate_expired(self):
        """
        Clear is_active on subscriptions whose end date has passed.

        Returns:
            int: Number of rows deactivated
        """
        result = self.session.execute(
            update(Subscription)
            .where(Subscription.is_active.is_(True), Subscription.end_date < self.today())
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        self._commit()
        logger.info("Deactivated %s expired subscriptions", result.rowcount)
        return result.rowcount

    # -- helpers --------------------------------------------------------------

    def _lock_member(self, member_id):
        member = self.session.scalars(
            select(User).where(User.id == member_id).with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return member

    def _lock_subscription(self, subscription_id):
        subscription = self.session.scalars(
            select(Subscription)
            .where(Subscription.id == parse_int(subscription_id, 'subscription_id'))
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if subscription is None:
            raise NotFoundError(f"Subscription {subscription_id} not found")
        return subscription

    def _ensure_no_current(self, member_id, exclude_id=None):
        stmt = select(Subscription.id).where(
            Subscription.member_id == member_id,
            Subscription.is_current(self.today()),
        ).with_for_update()
        if exclude_id is not None:
            stmt = stmt.where(Subscription.id != exclude_id)
        if self.session.scalars(stmt.limit(1)).first() is not None:
            raise ConflictError("Member already has an active subscription")

    def _count(self, *criteria):
        stmt = select(func.count(Subscription.id))
        if criteria:
            stmt = stmt.where(*criteria)
        return self.session.scalar(stmt) or 0

    def _created_by_month(self, year):
        month = extract('month', Subscription.created_at)
        rows = self.session.execute(
            select(month.label('month'), func.count(Subscription.id))
            .where(extract('year', Subscription.created_at) == year)
            .group_by(month)
            .order_by(month)
        ).all()
        return [{'month': calendar.month_name[int(m)], 'count': count} for m, count in rows]

    def _commit(self):
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Integrity error on subscription write: %s", e.orig)
            raise ConflictError("Subscription conflicts with existing data")
