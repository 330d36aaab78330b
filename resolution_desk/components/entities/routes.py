"""
Entity Management API Routes
"""
from flask import Blueprint, current_app, jsonify, request

from resolution_desk.components import get_service
from resolution_desk.core.http import current_actor, json_body
from resolution_desk.core.pagination import parse_pagination

entities_bp = Blueprint('entities', __name__, url_prefix='/api/entities')


def _service():
    return get_service('entities')


@entities_bp.route('', methods=['GET'])
def api_list_entities():
    """List entities with type/status/search filters"""
    page, limit = parse_pagination(request.args, current_app.config)
    result = _service().get_my_entities(
        entity_type=request.args.get('entity_type'),
        status=request.args.get('status'),
        search=request.args.get('search'),
        page=page,
        limit=limit,
    )
    return jsonify(result)


@entities_bp.route('', methods=['POST'])
def api_create_entity():
    entity = _service().create_entity(json_body(), actor=current_actor())
    return jsonify(entity), 201


@entities_bp.route('/stats')
def api_entity_stats():
    return jsonify(_service().get_entity_stats())


@entities_bp.route('/verify/<cin>')
def api_verify_entity(cin):
    """Verify a CIN/LLPIN against the MCA master data"""
    return jsonify(_service().verify_with_mca(cin))


@entities_bp.route('/<entity_id>', methods=['GET'])
def api_get_entity(entity_id):
    return jsonify(_service().get_entity(entity_id))


@entities_bp.route('/<entity_id>', methods=['PUT', 'PATCH'])
def api_update_entity(entity_id):
    return jsonify(_service().update_entity(entity_id, json_body(), actor=current_actor()))


@entities_bp.route('/<entity_id>', methods=['DELETE'])
def api_delete_entity(entity_id):
    _service().delete_entity(entity_id, actor=current_actor())
    return jsonify({'deleted': True, 'id': entity_id})


@entities_bp.route('/<entity_id>/completion')
def api_entity_completion(entity_id):
    return jsonify(_service().profile_completion(entity_id))


@entities_bp.route('/<entity_id>/industry-details', methods=['GET'])
def api_get_industry_details(entity_id):
    return jsonify(_service().get_industry_details(entity_id))


@entities_bp.route('/<entity_id>/industry-details', methods=['PUT'])
def api_update_industry_details(entity_id):
    data = json_body()
    return jsonify(_service().update_industry_details(entity_id, data.get('industry_details')))


_SECTION_PATHS = {
    'financial-records': 'financial_records',
    'creditors': 'creditors',
    'bank-documents': 'bank_documents',
}


@entities_bp.route('/<entity_id>/<section_path>', methods=['GET'])
def api_list_section(entity_id, section_path):
    """List financial records, creditors or bank documents"""
    section = _SECTION_PATHS.get(section_path, section_path)
    return jsonify(_service().list_section(entity_id, section))


@entities_bp.route('/<entity_id>/<section_path>', methods=['POST'])
def api_add_section_item(entity_id, section_path):
    section = _SECTION_PATHS.get(section_path, section_path)
    record = _service().add_section_item(entity_id, section, json_body(), actor=current_actor())
    return jsonify(record), 201


@entities_bp.route('/<entity_id>/<section_path>/<item_id>', methods=['PUT', 'PATCH'])
def api_update_section_item(entity_id, section_path, item_id):
    section = _SECTION_PATHS.get(section_path, section_path)
    record = _service().update_section_item(entity_id, section, item_id, json_body(),
                                            actor=current_actor())
    return jsonify(record)
