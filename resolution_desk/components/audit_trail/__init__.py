"""
Audit Trail Component
"""
from resolution_desk.components import EXTENSION_KEY
from .routes import audit_trail_bp


def init_audit_trail(app):
    """Initialize Audit Trail component with Flask app"""
    app.register_blueprint(audit_trail_bp)
    return app.extensions[EXTENSION_KEY]['audit']


__all__ = ['audit_trail_bp', 'init_audit_trail']
