"""
Coach members namespace for coach assignments.
"""
from flask_restx import Namespace

coach_member_ns = Namespace(
    'coach-members',
    description='Assignment of members to coaches'
)

from . import routes
