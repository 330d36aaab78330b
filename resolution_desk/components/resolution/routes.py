"""
PRA Evaluation and Resolution Plan API Routes
"""
from flask import Blueprint, jsonify, request

from resolution_desk.components import get_service
from resolution_desk.core import ValidationError
from resolution_desk.core.http import current_actor, json_body

resolution_bp = Blueprint('resolution', __name__, url_prefix='/api/resolution')


def _service():
    return get_service('resolution')


@resolution_bp.route('/pras', methods=['GET'])
def api_list_pras():
    pras = _service().list_pra_applications(
        search=request.args.get('search'),
        status=request.args.get('status'),
        group_type=request.args.get('group_type'),
    )
    return jsonify({'data': pras, 'total': len(pras)})


@resolution_bp.route('/pras/stats')
def api_pra_stats():
    return jsonify(_service().get_compliance_stats())


@resolution_bp.route('/pras/alerts')
def api_pra_alerts():
    return jsonify({'alerts': _service().get_alerts()})


@resolution_bp.route('/pras/<pra_id>', methods=['GET'])
def api_get_pra(pra_id):
    return jsonify(_service().get_pra(pra_id))


@resolution_bp.route('/pras/<pra_id>', methods=['PUT', 'PATCH'])
def api_update_pra(pra_id):
    return jsonify(_service().update_pra(pra_id, json_body(), actor=current_actor()))


@resolution_bp.route('/pras/<pra_id>/approve', methods=['POST'])
def api_approve_pra(pra_id):
    data = json_body(required=False)
    return jsonify(_service().approve_pra(pra_id, evaluator=current_actor(), remarks=data.get('remarks', '')))


@resolution_bp.route('/pras/<pra_id>/reject', methods=['POST'])
def api_reject_pra(pra_id):
    data = json_body()
    return jsonify(_service().reject_pra(pra_id, data.get('reason'), evaluator=current_actor()))


@resolution_bp.route('/pras/<pra_id>/query', methods=['POST'])
def api_raise_pra_query(pra_id):
    data = json_body()
    return jsonify(_service().raise_pra_query(pra_id, data.get('query'), evaluator=current_actor()))


@resolution_bp.route('/auto-evaluate', methods=['POST'])
def api_auto_evaluate():
    """Run the eligibility checks over every application in review"""
    results = _service().auto_evaluate(evaluator=current_actor() or 'System')
    return jsonify({'results': results, 'evaluated': len(results)})


@resolution_bp.route('/plans', methods=['GET'])
def api_list_plans():
    plans = _service().list_plans(status=request.args.get('status'))
    return jsonify({'data': plans, 'total': len(plans)})


@resolution_bp.route('/plans', methods=['POST'])
def api_add_plan():
    return jsonify(_service().add_plan(json_body(), actor=current_actor())), 201


@resolution_bp.route('/plans/compare')
def api_compare_plans():
    plan_a, plan_b = request.args.get('a'), request.args.get('b')
    if not plan_a or not plan_b:
        raise ValidationError('Query parameters a and b are required')
    return jsonify(_service().compare_plans(plan_a, plan_b))


@resolution_bp.route('/plans/<plan_id>', methods=['GET'])
def api_get_plan(plan_id):
    return jsonify(_service().get_plan(plan_id))


@resolution_bp.route('/plans/<plan_id>/status', methods=['PUT', 'POST'])
def api_update_plan_status(plan_id):
    data = json_body()
    return jsonify(_service().update_plan_status(plan_id, data.get('status'), actor=current_actor()))


@resolution_bp.route('/plans/<plan_id>/liquidation-comparison')
def api_compare_with_liquidation(plan_id):
    return jsonify(_service().compare_with_liquidation(plan_id))


@resolution_bp.route('/liquidation-value', methods=['PUT'])
def api_set_liquidation_value():
    return jsonify(_service().set_liquidation_value(json_body(), actor=current_actor()))
