"""
Demo subscription settings
"""

DEMO_SETTINGS = {
    'user-001': {
        'auto_renewal': True,
        'renewal_reminders': True,
        'failed_payment_retry': True,
        'grace_period': True,
        'payment_methods': [
            {'id': 'pm-001', 'type': 'credit_card', 'details': '•••• 4532', 'is_default': True,
             'expiry_date': '12/26'},
            {'id': 'pm-002', 'type': 'credit_card', 'details': '•••• 8901', 'is_default': False,
             'expiry_date': '08/27'},
        ],
        'primary_payment_method': 'pm-001',
        'backup_payment_method': 'pm-002',
        'billing_cycle': 'monthly',
        'last_renewal_date': '2025-02-15',
        'module_settings': {
            'entity-management': {'auto_renewal': True, 'notifications': True, 'upgrade_alerts': True},
            'service-requests': {'auto_renewal': False, 'notifications': True, 'upgrade_alerts': False},
        },
        'notification_settings': {'email': True, 'sms': False, 'in_app': True},
    },
}
