"""
Record identifiers and human-facing document numbers
"""
import re
import threading
import uuid


def new_id(prefix):
    """Opaque record id such as wo-3f2a9c1d"""
    return f'{prefix}-{uuid.uuid4().hex[:8]}'


class SequenceGenerator:
    """Yearly running numbers such as WO2024004, SRN2025012 or PRE-2025-003"""

    def __init__(self, prefix, separator=''):
        self.prefix = prefix
        self.separator = separator
        self._pattern = re.compile(rf'^{re.escape(prefix)}(\d{{4}}){re.escape(separator)}(\d+)$')
        self._counters = {}
        self._lock = threading.Lock()

    def observe(self, number):
        """Account for an existing number so new ones never collide with it"""
        match = self._pattern.match(number or '')
        if not match:
            return
        year, seq = int(match.group(1)), int(match.group(2))
        with self._lock:
            self._counters[year] = max(self._counters.get(year, 0), seq)

    def next(self, year):
        with self._lock:
            seq = self._counters.get(year, 0) + 1
            self._counters[year] = seq
        return f'{self.prefix}{year}{self.separator}{seq:03d}'
