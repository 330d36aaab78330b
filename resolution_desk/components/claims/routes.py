"""
Claims API Routes
"""
from flask import Blueprint, current_app, jsonify, request

from resolution_desk.components import get_service
from resolution_desk.core.http import current_actor, json_body
from resolution_desk.core.pagination import parse_pagination

claims_bp = Blueprint('claims', __name__, url_prefix='/api/claims')


def _service():
    return get_service('claims')


@claims_bp.route('', methods=['GET'])
def api_list_claims():
    page, limit = parse_pagination(request.args, current_app.config)
    return jsonify(_service().list_claims(
        tab=request.args.get('tab', 'all'),
        search=request.args.get('search'),
        status=request.args.get('status'),
        source=request.args.get('source'),
        sort_by=request.args.get('sort_by', 'latest'),
        page=page,
        limit=limit,
    ))


@claims_bp.route('', methods=['POST'])
def api_submit_claim():
    """Claimant submission; team uploads set ``uploaded_by``"""
    data = json_body()
    if data.get('source') == 'team_uploaded':
        claim = _service().upload_claim(data, data.get('uploaded_by') or current_actor())
    else:
        claim = _service().submit_claim(data)
    return jsonify(claim), 201


@claims_bp.route('/stats')
def api_claim_stats():
    return jsonify(_service().get_claim_stats())


@claims_bp.route('/<claim_id>', methods=['GET'])
def api_get_claim(claim_id):
    return jsonify(_service().get_claim(claim_id))


@claims_bp.route('/<claim_id>', methods=['PUT', 'PATCH'])
def api_update_claim(claim_id):
    return jsonify(_service().update_claim(claim_id, json_body(), actor=current_actor()))


@claims_bp.route('/<claim_id>', methods=['DELETE'])
def api_delete_claim(claim_id):
    _service().delete_claim(claim_id, actor=current_actor())
    return jsonify({'deleted': True, 'id': claim_id})


@claims_bp.route('/<claim_id>/allocate', methods=['POST'])
def api_allocate_claim(claim_id):
    data = json_body()
    return jsonify(_service().allocate_claim(claim_id, data.get('assignee'), actor=current_actor()))


@claims_bp.route('/<claim_id>/verification', methods=['PUT', 'PATCH'])
def api_save_verification(claim_id):
    return jsonify(_service().save_verification(claim_id, json_body(), actor=current_actor()))


@claims_bp.route('/<claim_id>/queries', methods=['POST'])
def api_add_query(claim_id):
    data = json_body()
    return jsonify(_service().add_query(claim_id, data.get('question'), actor=current_actor())), 201


@claims_bp.route('/<claim_id>/queries/<query_id>', methods=['PUT'])
def api_respond_to_query(claim_id, query_id):
    data = json_body()
    return jsonify(_service().respond_to_query(claim_id, query_id, data.get('response'),
                                               actor=current_actor()))


@claims_bp.route('/<claim_id>/accept-platform-figure', methods=['POST'])
def api_accept_platform_figure(claim_id):
    return jsonify(_service().accept_platform_figure(claim_id, current_actor()))


@claims_bp.route('/<claim_id>/complete-verification', methods=['POST'])
def api_complete_verification(claim_id):
    return jsonify(_service().complete_verification(claim_id, current_actor()))


@claims_bp.route('/<claim_id>/admit', methods=['POST'])
def api_admit_claim(claim_id):
    data = json_body(required=False)
    return jsonify(_service().admit_claim(claim_id, current_actor(), amount=data.get('amount')))


@claims_bp.route('/<claim_id>/reject', methods=['POST'])
def api_reject_claim(claim_id):
    data = json_body()
    return jsonify(_service().reject_claim(claim_id, data.get('reason'), actor=current_actor()))


@claims_bp.route('/<claim_id>/audit-log')
def api_claim_audit_log(claim_id):
    return jsonify(_service().get_claim_audit_log(claim_id))
