"""
Litigation API Routes
"""
from flask import Blueprint, jsonify, request

from resolution_desk.components import get_service
from resolution_desk.core.http import current_actor, json_body

litigation_bp = Blueprint('litigation', __name__, url_prefix='/api/litigation')


def _service():
    return get_service('litigation')


@litigation_bp.route('/cases', methods=['GET'])
def api_list_cases():
    """List cases for a tab with type/status/search filters"""
    cases = _service().list_cases(
        tab=request.args.get('tab', 'all'),
        case_type=request.args.get('type'),
        status=request.args.get('status'),
        search=request.args.get('search'),
        sort_by=request.args.get('sort_by', 'latest'),
        entity=request.args.get('entity'),
    )
    return jsonify({'data': cases, 'total': len(cases)})


@litigation_bp.route('/cases', methods=['POST'])
def api_create_case():
    """Create a pre-filing draft or record an already filed case"""
    data = json_body()
    if data.get('type', 'pre-filing') == 'pre-filing':
        case = _service().create_pre_filing(data, actor=current_actor())
    else:
        case = _service().create_active_case(data, actor=current_actor())
    return jsonify(case), 201


@litigation_bp.route('/stats')
def api_litigation_stats():
    return jsonify(_service().get_litigation_stats(request.args.get('entity')))


@litigation_bp.route('/cases/<case_id>', methods=['GET'])
def api_get_case(case_id):
    return jsonify(_service().get_case(case_id))


@litigation_bp.route('/cases/<case_id>', methods=['PUT', 'PATCH'])
def api_update_case(case_id):
    return jsonify(_service().update_case(case_id, json_body(), actor=current_actor()))


@litigation_bp.route('/cases/<case_id>', methods=['DELETE'])
def api_delete_case(case_id):
    _service().delete_case(case_id, actor=current_actor())
    return jsonify({'deleted': True, 'id': case_id})


@litigation_bp.route('/cases/<case_id>/file', methods=['POST'])
def api_file_case(case_id):
    data = json_body()
    return jsonify(_service().file_pre_filing(case_id, data.get('case_number'), data.get('filed_date'),
                                              actor=current_actor()))


@litigation_bp.route('/cases/<case_id>/hearings', methods=['POST'])
def api_schedule_hearing(case_id):
    data = json_body()
    hearing = _service().schedule_hearing(case_id, data.get('date'), data.get('purpose'),
                                          actor=current_actor())
    return jsonify(hearing), 201


@litigation_bp.route('/cases/<case_id>/hearings/<hearing_id>', methods=['PUT'])
def api_record_hearing(case_id, hearing_id):
    data = json_body()
    return jsonify(_service().record_hearing_outcome(case_id, hearing_id, data.get('outcome'),
                                                     next_date=data.get('next_date'),
                                                     actor=current_actor()))


@litigation_bp.route('/cases/<case_id>/close', methods=['POST'])
def api_close_case(case_id):
    data = json_body()
    return jsonify(_service().close_case(case_id, data.get('result'), actor=current_actor()))


@litigation_bp.route('/cases/<case_id>/documents', methods=['POST'])
def api_add_document(case_id):
    return jsonify(_service().add_document(case_id, json_body(), actor=current_actor())), 201
