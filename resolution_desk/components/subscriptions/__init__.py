"""
Subscriptions Component
Renewal preferences and payment methods per user
"""
from resolution_desk.components import build_service
from .routes import subscriptions_bp
from .service import SubscriptionService


def init_subscriptions(app):
    """Initialize Subscriptions component with Flask app"""
    app.register_blueprint(subscriptions_bp)
    return build_service(app, 'subscriptions')


__all__ = ['subscriptions_bp', 'SubscriptionService', 'init_subscriptions']
