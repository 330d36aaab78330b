"""
Work Order Component
Proforma, payment, signature and execution tracking for engagements
"""
from resolution_desk.components import build_service
from .routes import work_orders_bp
from .service import WorkOrderService


def init_work_orders(app):
    """Initialize Work Order component with Flask app"""
    app.register_blueprint(work_orders_bp)
    return build_service(app, 'work_orders')


__all__ = ['work_orders_bp', 'WorkOrderService', 'init_work_orders']
