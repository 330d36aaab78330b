"""
Resolution Desk API
Flask application assembling the insolvency practice components
"""
import logging

from flask import Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from resolution_desk.components import EXTENSION_KEY
from resolution_desk.config.settings import DeskConfig
from resolution_desk.core import AuditTrail, DeskError, HealthMonitor
from resolution_desk.routes.main_routes import main_bp

from resolution_desk.components.entities import init_entities
from resolution_desk.components.service_requests import init_service_requests
from resolution_desk.components.work_orders import init_work_orders
from resolution_desk.components.claims import init_claims
from resolution_desk.components.litigation import init_litigation
from resolution_desk.components.resolution import init_resolution
from resolution_desk.components.subscriptions import init_subscriptions
from resolution_desk.components.audit_trail import init_audit_trail

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Render desk errors and unexpected failures as JSON"""

    @app.errorhandler(DeskError)
    def handle_desk_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f'Unhandled error: {error}')
        return jsonify({'error': 'Internal server error'}), 500


class DeskApp:
    """Main desk application class"""

    def __init__(self):
        self.app = None
        self.audit = None

    def create_app(self, config_object=DeskConfig, clock=None):
        """Create and configure Flask application"""
        self.app = Flask(__name__)

        # Load configuration
        self.app.config.from_object(config_object)

        # Initialize extensions
        Limiter(
            key_func=get_remote_address,
            app=self.app,
            default_limits=[self.app.config['RATELIMIT_DEFAULT']],
            storage_uri=self.app.config['RATELIMIT_STORAGE_URI'],
        )

        # Shared state every component service is built with
        self.audit = AuditTrail(max_entries=self.app.config['MAX_AUDIT_ENTRIES'], clock=clock)
        self.app.extensions[EXTENSION_KEY] = {
            'audit': self.audit,
            'clock': clock,
            'health': HealthMonitor(),
        }

        # Initialize components
        init_entities(self.app)
        init_service_requests(self.app)
        init_work_orders(self.app)
        init_claims(self.app)
        init_litigation(self.app)
        init_resolution(self.app)
        init_subscriptions(self.app)
        init_audit_trail(self.app)

        # Register main blueprint
        self.app.register_blueprint(main_bp)
        register_error_handlers(self.app)

        self.audit.record('desk', 'startup', 'Resolution desk initialised')
        return self.app

    def run(self):
        """Start the desk API"""
        host = self.app.config['HOST']
        port = self.app.config['PORT']

        logger.info("=" * 60)
        logger.info("Resolution Desk API")
        logger.info(f"Starting on: http://{host}:{port}")
        logger.info("Endpoints:")
        logger.info(f"   - Health:    http://{host}:{port}/health")
        logger.info(f"   - Index:     http://{host}:{port}/api")
        logger.info(f"   - Audit:     http://{host}:{port}/api/audit")
        logger.info("=" * 60)

        self.app.run(host=host, port=port, debug=False)


def create_app(config_object=DeskConfig, clock=None):
    """Build a configured Flask app without serving it"""
    return DeskApp().create_app(config_object, clock=clock)


def main():
    """Main entry point"""
    desk = DeskApp()
    desk.create_app()
    desk.run()


if __name__ == '__main__':
    main()
