"""
Work Order API Routes
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from resolution_desk.components import get_service
from resolution_desk.core import ValidationError
from resolution_desk.core.http import arg_float, current_actor, json_body
from resolution_desk.core.pagination import parse_list_arg, parse_pagination

logger = logging.getLogger(__name__)

work_orders_bp = Blueprint('work_orders', __name__, url_prefix='/api/work-orders')


def _service():
    return get_service('work_orders')


def _filters():
    return {
        'status': parse_list_arg(request.args, 'status'),
        'wo_number': request.args.get('wo_number'),
        'reference_number': request.args.get('reference_number'),
        'types': parse_list_arg(request.args, 'type'),
        'date_from': request.args.get('date_from'),
        'date_to': request.args.get('date_to'),
        'amount_min': arg_float('amount_min'),
        'amount_max': arg_float('amount_max'),
        'sort_by': request.args.get('sort_by', 'created_at'),
        'sort_order': request.args.get('sort_order', 'desc'),
    }


@work_orders_bp.route('', methods=['GET'])
def api_list_work_orders():
    """List work orders from the seeker's or the provider's side"""
    page, limit = parse_pagination(request.args, current_app.config)
    role = request.args.get('role', 'seeker')
    party_id = request.args.get('party_id')
    if role == 'provider':
        result = _service().get_work_orders_for_provider(party_id, page=page, limit=limit, **_filters())
    elif role == 'seeker':
        result = _service().get_work_orders_for_seeker(party_id, page=page, limit=limit, **_filters())
    else:
        raise ValidationError('role must be one of: seeker, provider')
    return jsonify(result)


@work_orders_bp.route('', methods=['POST'])
def api_create_work_order():
    return jsonify(_service().create_work_order(json_body(), actor=current_actor())), 201


@work_orders_bp.route('/from-bid', methods=['POST'])
def api_create_from_bid():
    """Turn an accepted bid into a proforma work order"""
    data = json_body()
    requests_service = get_service('service_requests')
    bid = requests_service.get_bid(data.get('bid_id'))
    service_request = requests_service.get_service_request(
        data.get('service_request_id') or bid['service_request_id'])
    work_order = _service().create_work_order_from_bid(bid, service_request,
                                                       payment_terms=data.get('payment_terms'),
                                                       actor=current_actor())
    requests_service.mark_work_order_issued(service_request['id'], work_order['id'])
    logger.info('Work order %s issued for %s', work_order['id'], service_request['srn_number'])
    return jsonify(work_order), 201


@work_orders_bp.route('/stats')
def api_work_order_stats():
    return jsonify(_service().get_work_order_stats(request.args.get('party_id'),
                                                   request.args.get('party_type', 'seeker')))


@work_orders_bp.route('/<work_order_id>', methods=['GET'])
def api_get_work_order(work_order_id):
    return jsonify(_service().get_work_order(work_order_id))


@work_orders_bp.route('/<work_order_id>/status', methods=['PUT', 'POST'])
def api_update_status(work_order_id):
    data = json_body()
    return jsonify(_service().update_work_order_status(
        work_order_id, data.get('status'), actor=current_actor(),
        actor_type=data.get('actor_type', 'system')))


@work_orders_bp.route('/<work_order_id>/payment', methods=['POST'])
def api_make_payment(work_order_id):
    data = json_body()
    return jsonify(_service().make_payment(work_order_id, data.get('amount'),
                                           mode=data.get('mode', 'Bank Transfer'),
                                           paid_by=current_actor()))


@work_orders_bp.route('/<work_order_id>/sign', methods=['POST'])
def api_sign(work_order_id):
    data = json_body()
    return jsonify(_service().sign_work_order(work_order_id, data.get('signature_type'),
                                              data.get('party'), signed_by=current_actor()))


@work_orders_bp.route('/<work_order_id>/complete', methods=['POST'])
def api_mark_complete(work_order_id):
    return jsonify(_service().mark_complete(work_order_id, actor=current_actor()))


@work_orders_bp.route('/<work_order_id>/disputes', methods=['POST'])
def api_raise_dispute(work_order_id):
    data = json_body()
    data.setdefault('raised_by', current_actor())
    return jsonify(_service().raise_dispute(work_order_id, data)), 201


@work_orders_bp.route('/<work_order_id>/disputes/<dispute_id>/resolve', methods=['POST'])
def api_resolve_dispute(work_order_id, dispute_id):
    data = json_body()
    return jsonify(_service().resolve_dispute(work_order_id, dispute_id, data.get('resolution'),
                                              resume_status=data.get('resume_status', 'in_progress'),
                                              actor=current_actor()))


@work_orders_bp.route('/<work_order_id>/feedback', methods=['POST'])
def api_feedback(work_order_id):
    data = json_body()
    data.setdefault('provided_by', current_actor())
    return jsonify(_service().provide_feedback(work_order_id, data)), 201


@work_orders_bp.route('/<work_order_id>/fee-advices', methods=['GET'])
def api_list_fee_advices(work_order_id):
    return jsonify(_service().get_work_order(work_order_id)['financials']['fee_advices'])


@work_orders_bp.route('/<work_order_id>/fee-advices', methods=['POST'])
def api_raise_fee_advice(work_order_id):
    advice = _service().raise_fee_advice(work_order_id, json_body(), created_by=current_actor())
    return jsonify(advice), 201


@work_orders_bp.route('/<work_order_id>/fee-advices/<advice_id>/accept', methods=['POST'])
def api_accept_fee_advice(work_order_id, advice_id):
    return jsonify(_service().accept_fee_advice(work_order_id, advice_id, reviewed_by=current_actor()))


@work_orders_bp.route('/<work_order_id>/fee-advices/<advice_id>/reject', methods=['POST'])
def api_reject_fee_advice(work_order_id, advice_id):
    data = json_body()
    return jsonify(_service().reject_fee_advice(work_order_id, advice_id, data.get('reason'),
                                                reviewed_by=current_actor()))


@work_orders_bp.route('/<work_order_id>/information-requests', methods=['POST'])
def api_raise_information_request(work_order_id):
    record = _service().raise_information_request(work_order_id, json_body(),
                                                  requested_by=current_actor())
    return jsonify(record), 201


@work_orders_bp.route('/<work_order_id>/information-requests/<request_id>/respond', methods=['POST'])
def api_respond_information_request(work_order_id, request_id):
    data = json_body()
    return jsonify(_service().respond_to_information_request(
        work_order_id, request_id, data.get('response'), documents=data.get('documents'),
        responded_by=current_actor()))


@work_orders_bp.route('/<work_order_id>/milestones/<milestone_id>', methods=['PUT', 'PATCH'])
def api_update_milestone(work_order_id, milestone_id):
    data = json_body()
    return jsonify(_service().update_milestone_status(work_order_id, milestone_id, data.get('status'),
                                                      actor=current_actor()))


@work_orders_bp.route('/<work_order_id>/progress')
def api_progress(work_order_id):
    return jsonify(_service().get_progress(work_order_id))


@work_orders_bp.route('/<work_order_id>/team', methods=['POST'])
def api_allocate_team_member(work_order_id):
    data = json_body()
    access = _service().allocate_team_member(work_order_id, data, data.get('access_tabs'),
                                             allocated_by=current_actor())
    return jsonify(access), 201


@work_orders_bp.route('/<work_order_id>/team/<member_id>', methods=['DELETE'])
def api_revoke_team_member(work_order_id, member_id):
    return jsonify(_service().revoke_team_member(work_order_id, member_id, actor=current_actor()))


@work_orders_bp.route('/<work_order_id>/activities')
def api_activities(work_order_id):
    return jsonify(_service().get_activities(work_order_id))
