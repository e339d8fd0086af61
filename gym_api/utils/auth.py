"""
Authentication utilities and decorators.
"""
from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity

from gym_api.utils.policy import ensure_access


def current_caller():
    """
    Role and user ID of the authenticated caller.

    Must be called inside a request protected by jwt_required().

    Returns:
        tuple: (role, user_id)
    """
    claims = get_jwt()
    identity = get_jwt_identity()
    user_id = int(identity) if identity is not None else None
    return claims.get('role'), user_id


def role_required(operation):
    """
    Decorator to check the caller's role against the policy table.
    Must be used after jwt_required() decorator.

    Args:
        operation (str): Operation key checked without a target owner

    Returns:
        function: Decorator function
    """
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            role, user_id = current_caller()
            ensure_access(role, user_id, operation)
            return fn(*args, **kwargs)
        return decorator
    return wrapper
