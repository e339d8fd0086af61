"""
Routes for the membership catalog.
"""
from flask import request
from flask_jwt_extended import jwt_required
from flask_restx import Resource, fields

from gym_api.errors import ValidationError
from gym_api.services import membership_catalog
from gym_api.utils.auth import role_required
from gym_api.utils.json_helpers import envelope
from gym_api.utils.policy import Operation
from gym_api.utils.validation import parse_bool

from . import membership_ns

# Define the membership model for API
membership_model = membership_ns.model('Membership', {
    'id': fields.Integer(description='Membership ID'),
    'name': fields.String(required=True, description='Membership name'),
    'description': fields.String(description='Membership description'),
    'price': fields.Float(required=True, description='Price'),
    'duration_days': fields.Integer(required=True, description='Duration in days'),
    'has_coach': fields.Boolean(description='Includes a personal coach'),
    'has_workout_plan': fields.Boolean(description='Includes a workout plan'),
    'has_nutrition_plan': fields.Boolean(description='Includes a nutrition plan'),
    'is_active': fields.Boolean(description='Available for new subscriptions'),
    'created_at': fields.DateTime(description='Creation date'),
    'updated_at': fields.DateTime(description='Last update date'),
})

membership_envelope = membership_ns.model('MembershipEnvelope', {
    'success': fields.Boolean(default=True),
    'message': fields.String,
    'data': fields.Nested(membership_model),
})

membership_list_envelope = membership_ns.model('MembershipListEnvelope', {
    'success': fields.Boolean(default=True),
    'message': fields.String,
    'data': fields.List(fields.Nested(membership_model)),
})

# Input model for creating/updating memberships
membership_input_model = membership_ns.model('MembershipInput', {
    'name': fields.String(required=True, description='Membership name'),
    'description': fields.String(description='Membership description'),
    'price': fields.Float(required=True, description='Price', min=0),
    'duration_days': fields.Integer(required=True, description='Duration in days', min=1),
    'has_coach': fields.Boolean(description='Includes a personal coach', default=False),
    'has_workout_plan': fields.Boolean(description='Includes a workout plan', default=False),
    'has_nutrition_plan': fields.Boolean(description='Includes a nutrition plan', default=False),
    'is_active': fields.Boolean(description='Available for new subscriptions', default=True),
})

MEMBERSHIP_FIELDS = ('name', 'description', 'price', 'duration_days',
                     'has_coach', 'has_workout_plan', 'has_nutrition_plan', 'is_active')


def _membership_fields():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return {k: data[k] for k in MEMBERSHIP_FIELDS if k in data}


@membership_ns.route('/')
class MembershipList(Resource):
    """Resource for listing and creating memberships"""

    @membership_ns.doc('list_memberships', params={
        'active_only': {'type': 'boolean', 'default': 'false', 'description': 'Only memberships on sale'},
        'search': {'type': 'string', 'description': 'Match name or description'},
    })
    @membership_ns.marshal_with(membership_list_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.MEMBERSHIPS_LIST)
    def get(self):
        """List memberships ordered by price"""
        active_only = parse_bool(request.args.get('active_only', 'false'), 'active_only')
        memberships = membership_catalog().list(
            active_only=active_only,
            search=request.args.get('search'),
        )
        return {'success': True, 'data': memberships}

    @membership_ns.doc('create_membership')
    @membership_ns.expect(membership_input_model)
    @membership_ns.marshal_with(membership_envelope, code=201, skip_none=True)
    @membership_ns.response(400, 'Invalid input')
    @jwt_required()
    @role_required(Operation.MEMBERSHIPS_MANAGE)
    def post(self):
        """Create a membership (admin only)"""
        membership = membership_catalog().create(**_membership_fields())
        return {
            'success': True,
            'message': 'Membership created successfully',
            'data': membership
        }, 201


@membership_ns.route('/<int:id>')
@membership_ns.param('id', 'The membership identifier')
class MembershipResource(Resource):
    """Resource for individual membership operations"""

    @membership_ns.doc('get_membership')
    @membership_ns.marshal_with(membership_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.MEMBERSHIPS_VIEW)
    def get(self, id):
        """Get a membership"""
        return {'success': True, 'data': membership_catalog().get(id)}

    @membership_ns.doc('update_membership')
    @membership_ns.expect(membership_input_model)
    @membership_ns.marshal_with(membership_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.MEMBERSHIPS_MANAGE)
    def put(self, id):
        """Update a membership (admin only)"""
        membership = membership_catalog().update(id, **_membership_fields())
        return {
            'success': True,
            'message': 'Membership updated successfully',
            'data': membership
        }

    @membership_ns.doc('delete_membership')
    @membership_ns.response(409, 'Membership is referenced by subscriptions')
    @jwt_required()
    @role_required(Operation.MEMBERSHIPS_MANAGE)
    def delete(self, id):
        """Delete a membership no subscription references (admin only)"""
        membership_catalog().delete(id)
        return envelope(message='Membership deleted successfully')


@membership_ns.route('/stats')
class MembershipStats(Resource):
    """Resource for catalog statistics"""

    @membership_ns.doc('get_membership_stats')
    @jwt_required()
    @role_required(Operation.MEMBERSHIPS_STATS)
    def get(self):
        """Catalog counts and revenue per membership (admin only)"""
        return envelope(membership_catalog().stats())
