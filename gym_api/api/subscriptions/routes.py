"""
Routes for member subscriptions.
"""
from flask import current_app, request
from flask_jwt_extended import jwt_required
from flask_restx import Resource, fields

from gym_api import db
from gym_api.errors import ValidationError
from gym_api.models.subscription import SubscriptionStatus
from gym_api.models.user import UserRole
from gym_api.services import coach_assignments, subscription_manager
from gym_api.utils.auth import current_caller, role_required
from gym_api.utils.json_helpers import envelope
from gym_api.utils.policy import Operation, ensure_access
from gym_api.utils.validation import parse_int

from . import subscription_ns


def _status_now(subscription):
    return subscription.status_on(
        current_app.config['CLOCK'](), current_app.config['EXPIRING_SOON_DAYS']
    ).value


membership_summary_model = subscription_ns.model('MembershipSummary', {
    'id': fields.Integer(description='Membership ID'),
    'name': fields.String(description='Membership name'),
    'price': fields.Float(description='Current catalog price'),
    'duration_days': fields.Integer(description='Duration in days'),
})

member_summary_model = subscription_ns.model('MemberSummary', {
    'id': fields.Integer(description='Member ID'),
    'name': fields.String(description='Member name'),
    'email': fields.String(description='Member email'),
})

subscription_model = subscription_ns.model('Subscription', {
    'id': fields.Integer(description='Subscription ID'),
    'member_id': fields.Integer(description='Member ID'),
    'membership_id': fields.Integer(description='Membership ID'),
    'start_date': fields.Date(description='Start date'),
    'end_date': fields.Date(description='End date'),
    'is_active': fields.Boolean(description='Active flag'),
    'status': fields.String(description='Derived status', attribute=_status_now,
                            enum=[s.value for s in SubscriptionStatus]),
    'price': fields.Float(description='Price recorded at creation'),
    'duration_days': fields.Integer(description='Duration recorded at creation'),
    'notes': fields.String(description='Notes'),
    'cancelled_at': fields.DateTime(description='Cancellation date'),
    'created_at': fields.DateTime(description='Creation date'),
    'updated_at': fields.DateTime(description='Last update date'),
    'membership': fields.Nested(membership_summary_model, description='Membership details'),
    'member': fields.Nested(member_summary_model, description='Member details'),
})

subscription_envelope = subscription_ns.model('SubscriptionEnvelope', {
    'success': fields.Boolean(default=True),
    'message': fields.String,
    'data': fields.Nested(subscription_model, allow_null=True),
})

subscription_list_envelope = subscription_ns.model('SubscriptionListEnvelope', {
    'success': fields.Boolean(default=True),
    'message': fields.String,
    'data': fields.List(fields.Nested(subscription_model)),
})

subscription_page_model = subscription_ns.model('SubscriptionPage', {
    'items': fields.List(fields.Nested(subscription_model)),
    'total': fields.Integer(description='Total number of subscriptions'),
    'page': fields.Integer(description='Current page number'),
    'per_page': fields.Integer(description='Items per page'),
    'pages': fields.Integer(description='Total number of pages'),
})

subscription_page_envelope = subscription_ns.model('SubscriptionPageEnvelope', {
    'success': fields.Boolean(default=True),
    'message': fields.String,
    'data': fields.Nested(subscription_page_model),
})

# Input model for creating a subscription
subscription_input_model = subscription_ns.model('SubscriptionInput', {
    'member_id': fields.Integer(required=True, description='Member to subscribe'),
    'membership_id': fields.Integer(required=True, description='Membership to subscribe to'),
    'start_date': fields.Date(required=True, description='Start date (YYYY-MM-DD)'),
    'end_date': fields.Date(required=True, description='End date (YYYY-MM-DD), after start_date'),
    'notes': fields.String(description='Notes'),
})

subscription_update_model = subscription_ns.model('SubscriptionUpdate', {
    'start_date': fields.Date(description='Start date (YYYY-MM-DD)'),
    'end_date': fields.Date(description='End date (YYYY-MM-DD)'),
    'is_active': fields.Boolean(description='Active flag'),
    'notes': fields.String(description='Notes'),
})

renew_input_model = subscription_ns.model('RenewInput', {
    'extension_days': fields.Integer(description='Days added to the current end date', min=1),
    'new_end_date': fields.Date(description='New end date; never moves the end date backwards'),
})

pagination_params = {
    'page': {'type': 'integer', 'default': 1, 'description': 'Page number'},
    'per_page': {'type': 'integer', 'default': 15, 'description': 'Items per page'},
}


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


@subscription_ns.route('/')
class SubscriptionList(Resource):
    """Resource for listing and creating subscriptions"""

    @subscription_ns.doc('list_subscriptions', params={
        **pagination_params,
        'status': {'type': 'string', 'description': 'Filter by derived status',
                   'enum': [s.value for s in SubscriptionStatus]},
        'membership_id': {'type': 'integer', 'description': 'Filter by membership'},
        'member_id': {'type': 'integer', 'description': 'Filter by member (admin only)'},
    })
    @subscription_ns.marshal_with(subscription_page_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_LIST)
    def get(self):
        """List subscriptions (admin: all, member: own)"""
        role, user_id = current_caller()
        member_id = request.args.get('member_id')
        if role == UserRole.MEMBER.value:
            member_id = user_id
        else:
            ensure_access(role, user_id, Operation.SUBSCRIPTIONS_LIST_ALL)

        page = request.args.get('page', 1, type=int)
        per_page = request.args.get('per_page', current_app.config['PER_PAGE'], type=int)
        stmt = subscription_manager().query(
            status=request.args.get('status'),
            membership_id=request.args.get('membership_id'),
            member_id=member_id,
        )
        pagination = db.paginate(stmt, page=page, per_page=per_page, error_out=False)

        return {
            'success': True,
            'data': {
                'items': pagination.items,
                'total': pagination.total,
                'page': pagination.page,
                'per_page': pagination.per_page,
                'pages': pagination.pages
            }
        }

    @subscription_ns.doc('create_subscription')
    @subscription_ns.expect(subscription_input_model)
    @subscription_ns.marshal_with(subscription_envelope, code=201, skip_none=True)
    @subscription_ns.response(400, 'Invalid input')
    @subscription_ns.response(404, 'Member or membership not found')
    @subscription_ns.response(409, 'Member already has an active subscription')
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_CREATE)
    def post(self):
        """Create a subscription for a member (admin only)"""
        data = _json_body()
        subscription = subscription_manager().create(
            member_id=data.get('member_id'),
            membership_id=data.get('membership_id'),
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            notes=data.get('notes'),
        )
        return {
            'success': True,
            'message': 'Subscription created successfully',
            'data': subscription
        }, 201


@subscription_ns.route('/<int:id>')
@subscription_ns.param('id', 'The subscription identifier')
class SubscriptionResource(Resource):
    """Resource for individual subscription operations"""

    @subscription_ns.doc('get_subscription')
    @subscription_ns.marshal_with(subscription_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_VIEW)
    def get(self, id):
        """Get a subscription (admin, owning member or assigned coach)"""
        subscription = subscription_manager().get(id)
        role, user_id = current_caller()
        ensure_access(role, user_id, Operation.SUBSCRIPTIONS_VIEW,
                      target_owner_id=subscription.member_id,
                      is_assigned=coach_assignments().is_assigned)
        return {'success': True, 'data': subscription}

    @subscription_ns.doc('update_subscription')
    @subscription_ns.expect(subscription_update_model)
    @subscription_ns.marshal_with(subscription_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_UPDATE)
    def put(self, id):
        """Edit dates, notes or the active flag (admin only)"""
        data = _json_body()
        changes = {k: data[k] for k in ('start_date', 'end_date', 'is_active', 'notes') if k in data}
        subscription = subscription_manager().update(id, **changes)
        return {
            'success': True,
            'message': 'Subscription updated successfully',
            'data': subscription
        }

    @subscription_ns.doc('delete_subscription')
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_DELETE)
    def delete(self, id):
        """Delete a subscription (admin only)"""
        subscription_manager().delete(id)
        return envelope(message='Subscription deleted successfully')


@subscription_ns.route('/<int:id>/renew')
@subscription_ns.param('id', 'The subscription identifier')
class SubscriptionRenew(Resource):
    """Resource for renewing a subscription"""

    @subscription_ns.doc('renew_subscription')
    @subscription_ns.expect(renew_input_model)
    @subscription_ns.marshal_with(subscription_envelope, skip_none=True)
    @subscription_ns.response(404, 'Subscription not found')
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_RENEW)
    def post(self, id):
        """Extend a subscription and reactivate it (admin only)"""
        data = _json_body()
        subscription = subscription_manager().renew(
            id,
            new_end_date=data.get('new_end_date'),
            extension_days=data.get('extension_days'),
        )
        current_app.logger.info("Subscription %s renewed until %s", id, subscription.end_date)
        return {
            'success': True,
            'message': 'Subscription renewed successfully',
            'data': subscription
        }


@subscription_ns.route('/<int:id>/cancel')
@subscription_ns.param('id', 'The subscription identifier')
class SubscriptionCancel(Resource):
    """Resource for cancelling a subscription"""

    @subscription_ns.doc('cancel_subscription')
    @subscription_ns.marshal_with(subscription_envelope, skip_none=True)
    @subscription_ns.response(404, 'Subscription not found')
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_CANCEL)
    def post(self, id):
        """Cancel a subscription, ending it today (admin only)"""
        subscription = subscription_manager().cancel(id)
        return {
            'success': True,
            'message': 'Subscription cancelled successfully',
            'data': subscription
        }


@subscription_ns.route('/stats')
class SubscriptionStats(Resource):
    """Resource for subscription statistics"""

    @subscription_ns.doc('get_subscription_stats')
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_STATS)
    def get(self):
        """Counts by status and renewal figures (admin only)"""
        return envelope(subscription_manager().stats())


@subscription_ns.route('/expiring')
class ExpiringSubscriptions(Resource):
    """Resource for renewal-reminder reporting"""

    @subscription_ns.doc('list_expiring_subscriptions', params={
        'days': {'type': 'integer', 'default': 7, 'description': 'Look-ahead window in days'},
    })
    @subscription_ns.marshal_with(subscription_list_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_EXPIRING)
    def get(self):
        """Active subscriptions ending within the window, soonest first (admin only)"""
        days = request.args.get('days', current_app.config['EXPIRING_SOON_DAYS'])
        return {'success': True, 'data': subscription_manager().list_expiring_within(days)}


@subscription_ns.route('/current')
class CurrentSubscription(Resource):
    """Resource for the caller's current subscription"""

    @subscription_ns.doc('get_current_subscription')
    @subscription_ns.marshal_with(subscription_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_OWN)
    def get(self):
        """Get the caller's current subscription"""
        _, user_id = current_caller()
        subscription = subscription_manager().current_for_member(user_id)
        if subscription is None:
            return {'success': True, 'data': None, 'message': 'No active subscription found.'}
        return {'success': True, 'data': subscription}


@subscription_ns.route('/history')
class SubscriptionHistory(Resource):
    """Resource for the caller's subscription history"""

    @subscription_ns.doc('get_subscription_history')
    @subscription_ns.marshal_with(subscription_list_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_OWN)
    def get(self):
        """Get the caller's subscriptions, most recent first"""
        _, user_id = current_caller()
        return {'success': True, 'data': subscription_manager().list_for_member(user_id)}


@subscription_ns.route('/member/<int:member_id>')
@subscription_ns.param('member_id', 'The member identifier')
class MemberSubscriptions(Resource):
    """Resource for a member's subscription history"""

    @subscription_ns.doc('get_member_subscriptions')
    @subscription_ns.marshal_with(subscription_list_envelope, skip_none=True)
    @jwt_required()
    @role_required(Operation.SUBSCRIPTIONS_VIEW_MEMBER)
    def get(self, member_id):
        """Get a member's subscriptions (admin, the member, or an assigned coach)"""
        role, user_id = current_caller()
        ensure_access(role, user_id, Operation.SUBSCRIPTIONS_VIEW_MEMBER,
                      target_owner_id=parse_int(member_id, 'member_id'),
                      is_assigned=coach_assignments().is_assigned)
        return {'success': True, 'data': subscription_manager().list_for_member(member_id)}
