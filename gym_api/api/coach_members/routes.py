"""
Routes for coach assignments.
"""
from flask import request
from flask_jwt_extended import jwt_required
from flask_restx import Resource, fields

from gym_api.errors import ValidationError
from gym_api.services import coach_assignments
from gym_api.utils.auth import role_required
from gym_api.utils.json_helpers import envelope
from gym_api.utils.policy import Operation

from . import coach_member_ns

assignment_model = coach_member_ns.model('CoachMember', {
    'id': fields.Integer(description='Assignment ID'),
    'coach_id': fields.Integer(description='Coach ID'),
    'member_id': fields.Integer(description='Member ID'),
    'assigned_at': fields.DateTime(description='Assignment date'),
    'notes': fields.String(description='Notes'),
})

assignment_envelope = coach_member_ns.model('CoachMemberEnvelope', {
    'success': fields.Boolean(default=True),
    'message': fields.String,
    'data': fields.Nested(assignment_model),
})

assignment_list_envelope = coach_member_ns.model('CoachMemberListEnvelope', {
    'success': fields.Boolean(default=True),
    'data': fields.List(fields.Nested(assignment_model)),
})

assigned_member_model = coach_member_ns.model('AssignedMember', {
    'id': fields.Integer(description='Member ID'),
    'name': fields.String(description='Member name'),
    'email': fields.String(description='Member email'),
})

assigned_member_list_envelope = coach_member_ns.model('AssignedMemberListEnvelope', {
    'success': fields.Boolean(default=True),
    'data': fields.List(fields.Nested(assigned_member_model)),
})

assignment_input_model = coach_member_ns.model('CoachMemberInput', {
    'coach_id': fields.Integer(required=True, description='Coach ID'),
    'member_id': fields.Integer(required=True, description='Member ID'),
    'notes': fields.String(description='Notes'),
})


@coach_member_ns.route('/')
class CoachMemberList(Resource):
    """Resource for listing and creating assignments"""

    @coach_member_ns.doc('list_assignments', params={
        'coach_id': {'type': 'integer', 'description': 'Filter by coach'},
    })
    @coach_member_ns.marshal_with(assignment_list_envelope)
    @jwt_required()
    @role_required(Operation.COACH_MEMBERS_MANAGE)
    def get(self):
        """List coach assignments (admin only)"""
        coach_id = request.args.get('coach_id', type=int)
        return {'success': True, 'data': coach_assignments().list(coach_id=coach_id)}

    @coach_member_ns.doc('assign_member')
    @coach_member_ns.expect(assignment_input_model)
    @coach_member_ns.marshal_with(assignment_envelope, code=201, skip_none=True)
    @coach_member_ns.response(409, 'Member already assigned to this coach')
    @jwt_required()
    @role_required(Operation.COACH_MEMBERS_MANAGE)
    def post(self):
        """Assign a member to a coach (admin only)"""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        assignment = coach_assignments().assign(
            coach_id=data.get('coach_id'),
            member_id=data.get('member_id'),
            notes=data.get('notes'),
        )
        return {
            'success': True,
            'message': 'Member assigned successfully',
            'data': assignment
        }, 201


@coach_member_ns.route('/<int:id>')
@coach_member_ns.param('id', 'The assignment identifier')
class CoachMemberResource(Resource):
    """Resource for individual assignments"""

    @coach_member_ns.doc('remove_assignment')
    @jwt_required()
    @role_required(Operation.COACH_MEMBERS_MANAGE)
    def delete(self, id):
        """Remove an assignment (admin only)"""
        coach_assignments().unassign(id)
        return envelope(message='Assignment removed successfully')


@coach_member_ns.route('/coach/<int:coach_id>/members')
@coach_member_ns.param('coach_id', 'The coach identifier')
class CoachMembers(Resource):
    """Resource for a coach's members"""

    @coach_member_ns.doc('get_coach_members')
    @coach_member_ns.marshal_with(assigned_member_list_envelope)
    @jwt_required()
    @role_required(Operation.COACH_MEMBERS_MANAGE)
    def get(self, coach_id):
        """Members assigned to a coach (admin only)"""
        return {'success': True, 'data': coach_assignments().members_of(coach_id)}
