"""
Subscriptions namespace for the subscription lifecycle.
"""
from flask_restx import Namespace

subscription_ns = Namespace(
    'subscriptions', 
    description='Member subscriptions: create, renew, cancel and reporting'
)

from . import routes
