"""
Common plumbing for in-memory desk services
"""
import threading
from datetime import datetime

from resolution_desk.config.settings import DeskConfig
from .audit import AuditTrail


class DeskService:
    """Base class holding config, audit trail, clock and lock

    Subclasses set ``module`` to the name used in audit entries.
    """

    module = 'desk'

    def __init__(self, config=None, audit=None, clock=None):
        self.config = dict(config or {})
        self.audit = audit or AuditTrail()
        self.clock = clock or datetime.now
        self._lock = threading.RLock()

    def now(self):
        return self.clock()

    def now_iso(self):
        return self.clock().isoformat(timespec='seconds')

    def today(self):
        return self.clock().date()

    def setting(self, name, default=None):
        return self.config.get(name, default)

    def fee_rates(self):
        return DeskConfig.get_fee_rates(self.config)

    def _record(self, action, message, reference=None, actor=None, level='INFO'):
        return self.audit.record(self.module, action, message,
                                 reference=reference, actor=actor, level=level)
