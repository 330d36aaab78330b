"""
Health and index routes for the desk API
"""
import logging

from flask import Blueprint, current_app, jsonify

from resolution_desk.components import EXTENSION_KEY, registry

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)

API_INDEX = {
    'entities': '/api/entities',
    'service_requests': '/api/service-requests',
    'opportunities': '/api/opportunities',
    'work_orders': '/api/work-orders',
    'claims': '/api/claims',
    'litigation': '/api/litigation/cases',
    'resolution': '/api/resolution/pras',
    'resolution_plans': '/api/resolution/plans',
    'subscriptions': '/api/subscriptions/<user_id>/settings',
    'audit': '/api/audit',
    'health': '/health',
}


@main_bp.route('/health', methods=['GET'])
def health():
    """Health check with process resource usage"""
    state = current_app.extensions[EXTENSION_KEY]
    components = [name for name in registry.get_all_components() if name in state]
    return jsonify(state['health'].snapshot(components))


@main_bp.route('/api', methods=['GET'])
def api_index():
    return jsonify({'service': 'resolution-desk', 'endpoints': API_INDEX})
