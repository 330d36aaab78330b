"""
Subscription Settings API Routes
"""
from flask import Blueprint, jsonify

from resolution_desk.components import get_service
from resolution_desk.core.http import current_actor, json_body

subscriptions_bp = Blueprint('subscriptions', __name__, url_prefix='/api/subscriptions')


def _service():
    return get_service('subscriptions')


@subscriptions_bp.route('/<user_id>/settings', methods=['GET'])
def api_get_settings(user_id):
    return jsonify(_service().get_subscription_settings(user_id))


@subscriptions_bp.route('/<user_id>/settings', methods=['PUT', 'PATCH'])
def api_update_settings(user_id):
    return jsonify(_service().update_subscription_settings(user_id, json_body(), actor=current_actor()))


@subscriptions_bp.route('/<user_id>/auto-renewal', methods=['PUT'])
def api_global_auto_renewal(user_id):
    data = json_body()
    return jsonify(_service().update_global_auto_renewal(user_id, data.get('enabled'), actor=current_actor()))


@subscriptions_bp.route('/<user_id>/modules/<module_id>/auto-renewal', methods=['PUT'])
def api_module_auto_renewal(user_id, module_id):
    data = json_body()
    return jsonify(_service().update_module_auto_renewal(user_id, module_id, data.get('enabled'),
                                                         actor=current_actor()))


@subscriptions_bp.route('/<user_id>/renewals', methods=['POST'])
def api_record_renewal(user_id):
    data = json_body(required=False)
    return jsonify(_service().record_renewal(user_id, data.get('renewal_date'), actor=current_actor()))


@subscriptions_bp.route('/<user_id>/payment-methods', methods=['GET'])
def api_list_payment_methods(user_id):
    return jsonify({'payment_methods': _service().list_payment_methods(user_id)})


@subscriptions_bp.route('/<user_id>/payment-methods', methods=['POST'])
def api_add_payment_method(user_id):
    data = json_body()
    method = _service().add_payment_method(user_id, data, make_primary=bool(data.get('make_primary')),
                                           actor=current_actor())
    return jsonify(method), 201


@subscriptions_bp.route('/<user_id>/payment-methods/<method_id>/primary', methods=['POST'])
def api_set_primary_payment_method(user_id, method_id):
    return jsonify(_service().set_primary_payment_method(user_id, method_id, actor=current_actor()))


@subscriptions_bp.route('/<user_id>/payment-methods/<method_id>', methods=['DELETE'])
def api_remove_payment_method(user_id, method_id):
    _service().remove_payment_method(user_id, method_id, actor=current_actor())
    return jsonify({'deleted': True, 'id': method_id})
