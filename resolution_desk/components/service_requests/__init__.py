"""
Service Request Component
Seeker requests, provider bids, negotiation and opportunities
"""
from resolution_desk.components import build_service
from .routes import service_requests_bp
from .service import ServiceRequestService


def init_service_requests(app):
    """Initialize Service Request component with Flask app"""
    app.register_blueprint(service_requests_bp)
    return build_service(app, 'service_requests')


__all__ = ['service_requests_bp', 'ServiceRequestService', 'init_service_requests']
