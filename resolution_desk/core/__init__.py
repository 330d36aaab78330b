"""
Core services shared by desk components
"""
from .audit import AuditTrail
from .base import DeskService
from .errors import DeskError, ValidationError, NotFoundError, ConflictError
from .health import HealthMonitor

__all__ = [
    'AuditTrail',
    'DeskService',
    'DeskError',
    'ValidationError',
    'NotFoundError',
    'ConflictError',
    'HealthMonitor',
]
