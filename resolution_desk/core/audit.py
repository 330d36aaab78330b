"""
Domain audit trail shared by all desk components
"""
import logging
import threading
from collections import deque
from datetime import datetime

from .errors import ValidationError

logger = logging.getLogger(__name__)

LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


class AuditTrail:
    """Bounded in-memory log of business events

    Every state change made through a service lands here and is also
    forwarded to the standard logger.
    """

    def __init__(self, max_entries=1000, clock=None):
        self.entries = deque(maxlen=max_entries)
        self.clock = clock or datetime.now
        self._lock = threading.Lock()

    def record(self, module, action, message, reference=None, actor=None, level='INFO'):
        """Add an audit entry"""
        entry = {
            'timestamp': self.clock().isoformat(timespec='seconds'),
            'level': level,
            'module': module,
            'action': action,
            'reference': reference,
            'actor': actor,
            'message': message,
        }
        with self._lock:
            self.entries.append(entry)
        logger.log(getattr(logging, level, logging.INFO), '[%s] %s: %s', module, action, message)
        return entry

    def get_entries(self, level_filter='ALL', module=None, reference=None, limit=50):
        """Get the most recent entries matching the filters"""
        if limit is not None and limit < 0:
            raise ValidationError('limit must not be negative')
        with self._lock:
            entries = list(self.entries)

        if level_filter and level_filter != 'ALL':
            entries = [e for e in entries if e['level'] == level_filter]
        if module:
            entries = [e for e in entries if e['module'] == module]
        if reference:
            entries = [e for e in entries if e['reference'] == reference]

        if limit and len(entries) > limit:
            entries = entries[-limit:]
        return entries

    def clear(self):
        with self._lock:
            self.entries.clear()
