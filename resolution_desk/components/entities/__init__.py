"""
Entity Management Component
Client entities, MCA verification and onboarding sections
"""
from resolution_desk.components import build_service
from .routes import entities_bp
from .service import EntityService
from .mca_client import MCAClient


def init_entities(app):
    """Initialize Entity Management component with Flask app"""
    app.register_blueprint(entities_bp)
    return build_service(app, 'entities')


__all__ = ['entities_bp', 'EntityService', 'MCAClient', 'init_entities']
