"""
Resolution Desk configuration settings
"""
import os


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class DeskConfig:
    """Centralized configuration for the desk API"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me-in-production')
    JSON_SORT_KEYS = False
    HOST = os.environ.get('DESK_HOST', '0.0.0.0')
    PORT = int(os.environ.get('DESK_PORT', 8090))

    # Rate limiting
    RATELIMIT_ENABLED = _env_bool('RATELIMIT_ENABLED', True)
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '200 per minute')

    # Fee arithmetic
    PLATFORM_FEE_RATE = float(os.environ.get('PLATFORM_FEE_RATE', 0.10))
    GST_RATE = float(os.environ.get('GST_RATE', 0.18))
    CLAIM_INTEREST_RATE = float(os.environ.get('CLAIM_INTEREST_RATE', 0.12))

    # Listing
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

    # Audit trail
    MAX_AUDIT_ENTRIES = int(os.environ.get('MAX_AUDIT_ENTRIES', 1000))

    # MCA company master lookup. Empty URL means the bundled registry extract.
    MCA_API_URL = os.environ.get('MCA_API_URL', '')
    MCA_TIMEOUT = float(os.environ.get('MCA_TIMEOUT', 5))

    # Resolution / PRA evaluation
    PRA_APPROVAL_THRESHOLD = 80
    NEW_PRA_WINDOW_DAYS = 7

    # Service requests
    DEFAULT_SR_DEADLINE_DAYS = 30

    SEED_DEMO_DATA = _env_bool('SEED_DEMO_DATA', True)

    @classmethod
    def get_fee_rates(cls, overrides=None):
        """Get platform fee and GST rates, preferring values set in overrides"""
        overrides = overrides or {}
        return {
            'platform_rate': overrides.get('PLATFORM_FEE_RATE', cls.PLATFORM_FEE_RATE),
            'gst_rate': overrides.get('GST_RATE', cls.GST_RATE),
        }

    @classmethod
    def page_size(cls, requested=None, overrides=None):
        """Clamp a requested page size to the configured bounds"""
        overrides = overrides or {}
        if not requested:
            return overrides.get('DEFAULT_PAGE_SIZE', cls.DEFAULT_PAGE_SIZE)
        return max(1, min(int(requested), overrides.get('MAX_PAGE_SIZE', cls.MAX_PAGE_SIZE)))


class TestingConfig(DeskConfig):
    """Configuration used by the test suite"""

    TESTING = True
    RATELIMIT_ENABLED = False
    MCA_API_URL = ''
