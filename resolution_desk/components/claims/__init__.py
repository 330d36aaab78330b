"""
Claims Component
Creditor claim intake, verification and admission
"""
from resolution_desk.components import build_service
from .routes import claims_bp
from .service import ClaimService


def init_claims(app):
    """Initialize Claims component with Flask app"""
    app.register_blueprint(claims_bp)
    return build_service(app, 'claims')


__all__ = ['claims_bp', 'ClaimService', 'init_claims']
