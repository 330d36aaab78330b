"""
Litigation Component
Pre-filing drafts, active cases, hearings and outcomes
"""
from resolution_desk.components import build_service
from .routes import litigation_bp
from .service import LitigationService


def init_litigation(app):
    """Initialize Litigation component with Flask app"""
    app.register_blueprint(litigation_bp)
    return build_service(app, 'litigation')


__all__ = ['litigation_bp', 'LitigationService', 'init_litigation']
