"""
Service Request API Routes
"""
from flask import Blueprint, Response, current_app, jsonify, request

from resolution_desk.components import get_service
from resolution_desk.core import NotFoundError, ValidationError
from resolution_desk.core.http import arg_bool, arg_float, current_actor, json_body
from resolution_desk.core.pagination import parse_list_arg, parse_pagination

service_requests_bp = Blueprint('service_requests', __name__, url_prefix='/api')


def _service():
    return get_service('service_requests')


def _request_filters():
    return {
        'status': parse_list_arg(request.args, 'status'),
        'srn_number': request.args.get('srn_number'),
        'service_types': parse_list_arg(request.args, 'service_types'),
        'created_by': request.args.get('created_by'),
        'budget_min': arg_float('budget_min'),
        'budget_max': arg_float('budget_max'),
        'sort_by': request.args.get('sort_by', 'created_at'),
        'sort_order': request.args.get('sort_order', 'desc'),
    }


# Service requests

@service_requests_bp.route('/service-requests', methods=['GET'])
def api_list_service_requests():
    page, limit = parse_pagination(request.args, current_app.config)
    return jsonify(_service().get_service_requests(page=page, limit=limit, **_request_filters()))


@service_requests_bp.route('/service-requests', methods=['POST'])
def api_create_service_request():
    created = _service().create_service_request(json_body(), actor=current_actor())
    return jsonify(created), 201


@service_requests_bp.route('/service-requests/stats')
def api_service_request_stats():
    return jsonify(_service().get_service_request_stats(request.args.get('user_id')))


@service_requests_bp.route('/service-requests/ai-suggestions', methods=['POST'])
def api_ai_suggestions():
    """Suggest professionals, services and documents from a free-text brief"""
    data = json_body()
    return jsonify(_service().get_ai_suggestions(data.get('description')))


@service_requests_bp.route('/service-requests/export')
def api_export_service_requests():
    csv_text = _service().export_service_requests(**_request_filters())
    return Response(csv_text, mimetype='text/csv',
                    headers={'Content-Disposition': 'attachment; filename=service_requests.csv'})


@service_requests_bp.route('/service-requests/<request_id>', methods=['GET'])
def api_get_service_request(request_id):
    return jsonify(_service().get_service_request(request_id))


@service_requests_bp.route('/service-requests/<request_id>', methods=['PUT', 'PATCH'])
def api_update_service_request(request_id):
    return jsonify(_service().update_service_request(request_id, json_body(), actor=current_actor()))


@service_requests_bp.route('/service-requests/<request_id>', methods=['DELETE'])
def api_delete_service_request(request_id):
    if not _service().delete_service_request(request_id, actor=current_actor()):
        raise NotFoundError('Service request', request_id)
    return jsonify({'deleted': True, 'id': request_id})


@service_requests_bp.route('/service-requests/<request_id>/publish', methods=['POST'])
def api_publish_service_request(request_id):
    return jsonify(_service().publish_service_request(request_id, actor=current_actor()))


@service_requests_bp.route('/service-requests/<request_id>/cancel', methods=['POST'])
def api_cancel_service_request(request_id):
    data = json_body(required=False)
    return jsonify(_service().cancel_service_request(request_id, reason=data.get('reason'),
                                                     actor=current_actor()))


# Bids

@service_requests_bp.route('/service-requests/<request_id>/bids', methods=['GET'])
def api_list_bids(request_id):
    bids = _service().get_bids_for_service_request(
        request_id,
        status=parse_list_arg(request.args, 'status'),
        amount_min=arg_float('amount_min'),
        amount_max=arg_float('amount_max'),
        payment_structure=parse_list_arg(request.args, 'payment_structure'),
        invited_only=arg_bool('invited_only'),
        sort_order=request.args.get('sort_order', 'asc'),
    )
    return jsonify({'data': bids, 'total': len(bids)})


@service_requests_bp.route('/service-requests/<request_id>/bids', methods=['POST'])
def api_submit_bid(request_id):
    payload = dict(json_body(), service_request_id=request_id)
    return jsonify(_service().submit_bid(payload, actor=current_actor())), 201


@service_requests_bp.route('/service-requests/<request_id>/bids/export')
def api_export_bids(request_id):
    return Response(_service().export_bids(request_id), mimetype='text/csv',
                    headers={'Content-Disposition': f'attachment; filename=bids_{request_id}.csv'})


@service_requests_bp.route('/bids/<bid_id>', methods=['GET'])
def api_get_bid(bid_id):
    return jsonify(_service().get_bid(bid_id))


@service_requests_bp.route('/bids/<bid_id>', methods=['PUT', 'PATCH'])
def api_update_bid(bid_id):
    return jsonify(_service().update_bid(bid_id, json_body(), actor=current_actor()))


@service_requests_bp.route('/bids/<bid_id>/accept', methods=['POST'])
def api_accept_bid(bid_id):
    return jsonify(_service().accept_bid(bid_id, actor=current_actor()))


@service_requests_bp.route('/bids/<bid_id>/reject', methods=['POST'])
def api_reject_bid(bid_id):
    data = json_body(required=False)
    return jsonify(_service().reject_bid(bid_id, reason=data.get('reason'), actor=current_actor()))


@service_requests_bp.route('/bids/<bid_id>/withdraw', methods=['POST'])
def api_withdraw_bid(bid_id):
    return jsonify(_service().withdraw_bid(bid_id, actor=current_actor()))


# Negotiation

@service_requests_bp.route('/service-requests/<request_id>/negotiations', methods=['GET'])
def api_list_negotiations(request_id):
    return jsonify(_service().get_negotiations_for_service_request(request_id))


@service_requests_bp.route('/service-requests/<request_id>/negotiations', methods=['POST'])
def api_initiate_negotiation(request_id):
    data = json_body()
    thread = _service().initiate_negotiation(request_id, data.get('bid_id'), data.get('reasons'),
                                             initiated_by=current_actor())
    return jsonify(thread), 201


@service_requests_bp.route('/negotiations/<thread_id>', methods=['GET'])
def api_get_negotiation(thread_id):
    return jsonify(_service().get_negotiation(thread_id))


@service_requests_bp.route('/negotiations/<thread_id>/inputs', methods=['POST'])
def api_negotiation_input(thread_id):
    message = _service().submit_negotiation_input(thread_id, json_body(), sender=current_actor())
    return jsonify(message), 201


@service_requests_bp.route('/negotiations/<thread_id>/close', methods=['POST'])
def api_close_negotiation(thread_id):
    data = json_body()
    return jsonify(_service().close_negotiation(thread_id, data.get('outcome'), actor=current_actor()))


# Queries

@service_requests_bp.route('/service-requests/<request_id>/queries', methods=['GET'])
def api_list_queries(request_id):
    viewer = request.args.get('viewer_id') or current_actor()
    return jsonify(_service().get_queries_for_service_request(request_id, viewer))


@service_requests_bp.route('/service-requests/<request_id>/queries', methods=['POST'])
def api_post_query(request_id):
    data = json_body()
    query = _service().post_query(
        request_id,
        sender=data.get('sender') or current_actor(),
        message=data.get('message'),
        is_public=data.get('is_public', True),
        recipients=data.get('recipients'),
    )
    return jsonify(query), 201


@service_requests_bp.route('/queries/<query_id>/responses', methods=['POST'])
def api_respond_to_query(query_id):
    data = json_body()
    responder = data.get('responder') or current_actor()
    return jsonify(_service().respond_to_query(query_id, responder, data.get('message')))


# Provider opportunities

def _provider_id():
    provider_id = request.args.get('provider_id') or current_actor()
    if not provider_id:
        raise ValidationError('provider_id is required')
    return provider_id


@service_requests_bp.route('/opportunities', methods=['GET'])
def api_list_opportunities():
    page, limit = parse_pagination(request.args, current_app.config)
    return jsonify(_service().get_opportunities(
        _provider_id(),
        service_types=parse_list_arg(request.args, 'service_types'),
        location=request.args.get('location'),
        search=request.args.get('search'),
        page=page,
        limit=limit,
    ))


@service_requests_bp.route('/opportunities/stats')
def api_opportunity_stats():
    return jsonify(_service().get_opportunity_stats(_provider_id()))


@service_requests_bp.route('/opportunities/bulk-allocate', methods=['POST'])
def api_bulk_allocate():
    data = json_body()
    allocations = _service().bulk_allocate_opportunities(
        data.get('request_ids'), _provider_id(), data.get('member_id'), allocated_by=current_actor())
    return jsonify(allocations)


@service_requests_bp.route('/opportunities/<request_id>/not-interested', methods=['POST'])
def api_not_interested(request_id):
    data = json_body(required=False)
    _service().mark_opportunity_not_interested(_provider_id(), request_id, reason=data.get('reason'))
    return jsonify({'success': True, 'id': request_id})


@service_requests_bp.route('/opportunities/<request_id>/allocate', methods=['POST'])
def api_allocate_opportunity(request_id):
    data = json_body()
    allocation = _service().allocate_opportunity_to_team_member(
        request_id, _provider_id(), data.get('member_id'), allocated_by=current_actor())
    return jsonify(allocation)
