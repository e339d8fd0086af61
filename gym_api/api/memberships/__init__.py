"""
Memberships namespace for the catalog of plans.
"""
from flask_restx import Namespace

membership_ns = Namespace(
    'memberships',
    description='Membership catalog operations'
)

from . import routes
