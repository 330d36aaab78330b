"""
Subscription Settings Business Logic
"""
import calendar
import copy
import re

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import new_id
from resolution_desk.core.validators import ensure_choice, parse_date, require_fields
from .fixtures import DEMO_SETTINGS
from .models import (BillingCycle, CYCLE_MONTHS, DEFAULT_MODULE_SETTINGS, DEFAULT_NOTIFICATION_SETTINGS,
                     DEFAULT_RENEWAL_ATTEMPTS, PaymentMethodType)

BOOLEAN_FIELDS = ('auto_renewal', 'renewal_reminders', 'failed_payment_retry', 'grace_period')
UPDATABLE_FIELDS = BOOLEAN_FIELDS + (
    'primary_payment_method', 'backup_payment_method', 'renewal_attempts', 'billing_cycle',
    'last_renewal_date', 'module_settings', 'notification_settings',
)

EXPIRY_PATTERN = re.compile(r'^(0[1-9]|1[0-2])/\d{2}$')


def add_months(start, months):
    """Shift a date by whole months, clamping to the end of shorter months"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def _default_settings(user_id):
    return {
        'user_id': user_id,
        'auto_renewal': True,
        'renewal_reminders': True,
        'failed_payment_retry': True,
        'grace_period': True,
        'payment_methods': [],
        'primary_payment_method': None,
        'backup_payment_method': None,
        'renewal_attempts': dict(DEFAULT_RENEWAL_ATTEMPTS),
        'billing_cycle': BillingCycle.MONTHLY.value,
        'last_renewal_date': None,
        'next_renewal_date': None,
        'module_settings': {},
        'notification_settings': dict(DEFAULT_NOTIFICATION_SETTINGS),
    }


def _require_bool(value, field):
    if not isinstance(value, bool):
        raise ValidationError(f'{field} must be true or false')
    return value


@register_component('subscriptions')
class SubscriptionService(DeskService):
    """Service for per-user renewal preferences and payment methods"""

    module = 'subscriptions'

    def __init__(self, config=None, audit=None, clock=None):
        super().__init__(config, audit, clock)
        self.settings = {}

    def seed(self):
        for user_id, values in copy.deepcopy(DEMO_SETTINGS).items():
            settings = _default_settings(user_id)
            settings.update(values)
            self._refresh_next_renewal(settings)
            self.settings[user_id] = settings

    def _settings_for(self, user_id):
        if not user_id:
            raise ValidationError('user_id is required')
        with self._lock:
            if user_id not in self.settings:
                self.settings[user_id] = _default_settings(user_id)
            return self.settings[user_id]

    @staticmethod
    def _refresh_next_renewal(settings):
        if not settings['last_renewal_date']:
            settings['next_renewal_date'] = None
            return
        last = parse_date(settings['last_renewal_date'], 'last_renewal_date')
        months = CYCLE_MONTHS[BillingCycle(settings['billing_cycle'])]
        settings['next_renewal_date'] = add_months(last, months).isoformat()

    def get_subscription_settings(self, user_id):
        """Settings for a user, created with defaults on first read"""
        return copy.deepcopy(self._settings_for(user_id))

    # ── Validation ──────────────────────────────────────────────

    @staticmethod
    def _validate_renewal_attempts(value):
        if not isinstance(value, dict):
            raise ValidationError('renewal_attempts must be an object')
        errors = []
        for key, attempt in value.items():
            if key not in DEFAULT_RENEWAL_ATTEMPTS:
                errors.append(f'Unknown renewal attempt: {key}')
            elif not isinstance(attempt, int) or isinstance(attempt, bool) or attempt <= 0:
                errors.append(f'renewal_attempts.{key} must be a positive integer')
        if errors:
            raise ValidationError(errors)

    @staticmethod
    def _validate_flags(value, allowed, field):
        if not isinstance(value, dict):
            raise ValidationError(f'{field} must be an object')
        for key, flag in value.items():
            if key not in allowed:
                raise ValidationError(f'Unknown {field} key: {key}')
            _require_bool(flag, f'{field}.{key}')

    def _validate_changes(self, settings, changes):
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError('Unknown settings', details=[f'{key} cannot be updated' for key in unknown])

        for field in BOOLEAN_FIELDS:
            if field in changes:
                _require_bool(changes[field], field)
        if 'billing_cycle' in changes:
            ensure_choice(changes['billing_cycle'], BillingCycle, 'billing_cycle')
        if 'renewal_attempts' in changes:
            self._validate_renewal_attempts(changes['renewal_attempts'])
        if 'notification_settings' in changes:
            self._validate_flags(changes['notification_settings'], DEFAULT_NOTIFICATION_SETTINGS,
                                 'notification_settings')
        if 'module_settings' in changes:
            if not isinstance(changes['module_settings'], dict):
                raise ValidationError('module_settings must be an object')
            for module_id, values in changes['module_settings'].items():
                self._validate_flags(values, DEFAULT_MODULE_SETTINGS, f'module_settings.{module_id}')
        if changes.get('last_renewal_date'):
            parse_date(changes['last_renewal_date'], 'last_renewal_date')

        method_ids = {m['id'] for m in settings['payment_methods']}
        primary = changes.get('primary_payment_method', settings['primary_payment_method'])
        backup = changes.get('backup_payment_method', settings['backup_payment_method'])
        for field, method_id in (('primary_payment_method', primary), ('backup_payment_method', backup)):
            if field in changes and method_id is not None and method_id not in method_ids:
                raise ValidationError(f'{field} refers to an unknown payment method: {method_id}')
        if primary is not None and primary == backup:
            raise ValidationError('backup_payment_method must differ from primary_payment_method')

    # ── Settings updates ────────────────────────────────────────

    def update_subscription_settings(self, user_id, changes, actor=None):
        settings = self._settings_for(user_id)
        with self._lock:
            self._validate_changes(settings, changes)
            for key, value in copy.deepcopy(changes).items():
                if key == 'renewal_attempts':
                    settings['renewal_attempts'].update(value)
                elif key == 'notification_settings':
                    settings['notification_settings'].update(value)
                elif key == 'module_settings':
                    for module_id, values in value.items():
                        merged = settings['module_settings'].setdefault(module_id, dict(DEFAULT_MODULE_SETTINGS))
                        merged.update(values)
                elif key == 'last_renewal_date' and value:
                    settings[key] = parse_date(value, key).isoformat()
                else:
                    settings[key] = value
            if 'primary_payment_method' in changes:
                self._mark_default(settings)
            self._refresh_next_renewal(settings)
        self._record('settings_updated', f"Subscription settings updated: {', '.join(sorted(changes))}",
                     reference=user_id, actor=actor or user_id)
        return copy.deepcopy(settings)

    def update_global_auto_renewal(self, user_id, enabled, actor=None):
        _require_bool(enabled, 'enabled')
        settings = self._settings_for(user_id)
        with self._lock:
            settings['auto_renewal'] = enabled
        self._record('auto_renewal', f"Global auto-renewal {'enabled' if enabled else 'disabled'}",
                     reference=user_id, actor=actor or user_id)
        return copy.deepcopy(settings)

    def update_module_auto_renewal(self, user_id, module_id, enabled, actor=None):
        if not module_id:
            raise ValidationError('module_id is required')
        _require_bool(enabled, 'enabled')
        settings = self._settings_for(user_id)
        with self._lock:
            module = settings['module_settings'].setdefault(module_id, dict(DEFAULT_MODULE_SETTINGS))
            module['auto_renewal'] = enabled
        self._record('module_auto_renewal',
                     f"Auto-renewal for {module_id} {'enabled' if enabled else 'disabled'}",
                     reference=user_id, actor=actor or user_id)
        return copy.deepcopy(settings)

    def record_renewal(self, user_id, renewal_date=None, actor=None):
        """Mark the subscription renewed and move the next renewal date"""
        settings = self._settings_for(user_id)
        renewed = parse_date(renewal_date, 'renewal_date') if renewal_date else self.today()
        with self._lock:
            settings['last_renewal_date'] = renewed.isoformat()
            self._refresh_next_renewal(settings)
        self._record('renewed', f"Renewed on {settings['last_renewal_date']}, next {settings['next_renewal_date']}",
                     reference=user_id, actor=actor or user_id)
        return copy.deepcopy(settings)

    # ── Payment methods ─────────────────────────────────────────

    @staticmethod
    def _mark_default(settings):
        for method in settings['payment_methods']:
            method['is_default'] = method['id'] == settings['primary_payment_method']

    @staticmethod
    def _find_method(settings, method_id):
        for method in settings['payment_methods']:
            if method['id'] == method_id:
                return method
        raise NotFoundError('Payment method', method_id)

    def list_payment_methods(self, user_id):
        return copy.deepcopy(self._settings_for(user_id)['payment_methods'])

    def add_payment_method(self, user_id, method, make_primary=False, actor=None):
        errors = require_fields(method, ('type', 'details'))
        if errors:
            raise ValidationError(errors)
        method_type = ensure_choice(method['type'], PaymentMethodType, 'type')
        expiry = method.get('expiry_date')
        if expiry and not EXPIRY_PATTERN.match(str(expiry)):
            raise ValidationError('expiry_date must be in MM/YY format')

        settings = self._settings_for(user_id)
        record = {
            'id': new_id('pm'),
            'type': method_type.value,
            'details': method['details'],
            'is_default': False,
            'expiry_date': expiry,
        }
        with self._lock:
            settings['payment_methods'].append(record)
            if make_primary or settings['primary_payment_method'] is None:
                self._promote(settings, record['id'])
        self._record('payment_method_added', f"{record['type']} {record['details']} added",
                     reference=user_id, actor=actor or user_id)
        return dict(record)

    @staticmethod
    def _promote(settings, method_id):
        previous = settings['primary_payment_method']
        settings['primary_payment_method'] = method_id
        if settings['backup_payment_method'] == method_id:
            settings['backup_payment_method'] = previous
        SubscriptionService._mark_default(settings)

    def set_primary_payment_method(self, user_id, method_id, actor=None):
        settings = self._settings_for(user_id)
        with self._lock:
            self._find_method(settings, method_id)
            self._promote(settings, method_id)
        self._record('primary_payment_method', f'Primary payment method set to {method_id}',
                     reference=user_id, actor=actor or user_id)
        return copy.deepcopy(settings)

    def remove_payment_method(self, user_id, method_id, actor=None):
        settings = self._settings_for(user_id)
        with self._lock:
            method = self._find_method(settings, method_id)
            if settings['primary_payment_method'] == method_id:
                raise ConflictError('The primary payment method cannot be removed')
            settings['payment_methods'].remove(method)
            if settings['backup_payment_method'] == method_id:
                settings['backup_payment_method'] = None
        self._record('payment_method_removed', f"{method['type']} {method['details']} removed",
                     reference=user_id, actor=actor or user_id, level='WARNING')
        return True
