"""
Resolution Component
PRA eligibility evaluation and resolution plan ranking
"""
from resolution_desk.components import build_service
from .routes import resolution_bp
from .service import ResolutionService, compute_compliance_score


def init_resolution(app):
    """Initialize Resolution component with Flask app"""
    app.register_blueprint(resolution_bp)
    return build_service(app, 'resolution')


__all__ = ['resolution_bp', 'ResolutionService', 'compute_compliance_score', 'init_resolution']
