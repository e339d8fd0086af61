"""
Role policy table and access decisions.

Every endpoint consults ``can_access`` through ``role_required`` or
``ensure_access`` instead of testing roles inline.
"""
from enum import Enum

from gym_api.errors import AuthorizationError
from gym_api.models.user import UserRole


class Access(Enum):
    """Outcome of an access check."""
    ALLOW = "allow"
    DENY = "deny"


class Operation:
    """Operation keys referenced by the policy table."""
    SUBSCRIPTIONS_LIST = 'subscriptions.list'
    SUBSCRIPTIONS_LIST_ALL = 'subscriptions.list_all'
    SUBSCRIPTIONS_VIEW = 'subscriptions.view'
    SUBSCRIPTIONS_VIEW_MEMBER = 'subscriptions.view_member'
    SUBSCRIPTIONS_CREATE = 'subscriptions.create'
    SUBSCRIPTIONS_UPDATE = 'subscriptions.update'
    SUBSCRIPTIONS_DELETE = 'subscriptions.delete'
    SUBSCRIPTIONS_RENEW = 'subscriptions.renew'
    SUBSCRIPTIONS_CANCEL = 'subscriptions.cancel'
    SUBSCRIPTIONS_STATS = 'subscriptions.stats'
    SUBSCRIPTIONS_EXPIRING = 'subscriptions.expiring'
    SUBSCRIPTIONS_OWN = 'subscriptions.own'
    MEMBERSHIPS_LIST = 'memberships.list'
    MEMBERSHIPS_VIEW = 'memberships.view'
    MEMBERSHIPS_MANAGE = 'memberships.manage'
    MEMBERSHIPS_STATS = 'memberships.stats'
    COACH_MEMBERS_MANAGE = 'coach_members.manage'


ALL_OPERATIONS = frozenset(
    value for key, value in vars(Operation).items() if not key.startswith('_')
)

POLICY = {
    UserRole.ADMIN.value: ALL_OPERATIONS,
    UserRole.COACH.value: frozenset((
        Operation.SUBSCRIPTIONS_VIEW,
        Operation.SUBSCRIPTIONS_VIEW_MEMBER,
        Operation.MEMBERSHIPS_LIST,
        Operation.MEMBERSHIPS_VIEW,
    )),
    UserRole.MEMBER.value: frozenset((
        Operation.SUBSCRIPTIONS_LIST,
        Operation.SUBSCRIPTIONS_VIEW,
        Operation.SUBSCRIPTIONS_VIEW_MEMBER,
        Operation.SUBSCRIPTIONS_OWN,
        Operation.MEMBERSHIPS_LIST,
        Operation.MEMBERSHIPS_VIEW,
    )),
}


def can_access(caller_role, caller_id, operation, target_owner_id=None, is_assigned=None):
    """
    Decide whether a caller may perform an operation.

    Args:
        caller_role (str): admin, coach or member
        caller_id (int): Caller's user ID
        operation (str): Operation key from ``Operation``
        target_owner_id (int, optional): Member owning the target data
        is_assigned (callable, optional): ``is_assigned(coach_id, member_id)``
            lookup for coach-scoped data

    Returns:
        Access: ALLOW or DENY
    """
    if operation not in POLICY.get(caller_role, frozenset()):
        return Access.DENY
    if caller_role == UserRole.ADMIN.value or target_owner_id is None:
        return Access.ALLOW

    if caller_role == UserRole.MEMBER.value:
        allowed = caller_id is not None and int(caller_id) == int(target_owner_id)
    elif caller_role == UserRole.COACH.value:
        allowed = is_assigned is not None and caller_id is not None and bool(
            is_assigned(int(caller_id), int(target_owner_id)))
    else:
        allowed = False
    return Access.ALLOW if allowed else Access.DENY


def ensure_access(caller_role, caller_id, operation, target_owner_id=None, is_assigned=None):
    """
    Like ``can_access`` but raise on denial.

    Raises:
        AuthorizationError: The caller may not perform the operation
    """
    decision = can_access(caller_role, caller_id, operation, target_owner_id, is_assigned)
    if decision is Access.DENY:
        raise AuthorizationError("Access denied")
    return decision
