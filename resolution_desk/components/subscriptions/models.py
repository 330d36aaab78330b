"""
Subscription setting enumerations and defaults
"""
import enum


class BillingCycle(str, enum.Enum):
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'
    ANNUAL = 'annual'


class PaymentMethodType(str, enum.Enum):
    CREDIT_CARD = 'credit_card'
    BANK_TRANSFER = 'bank_transfer'
    UPI = 'upi'
    WALLET = 'wallet'


CYCLE_MONTHS = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.ANNUAL: 12,
}

# first_attempt: days before expiry, second_attempt: hours after a failure,
# final_notice: days before manual renewal is required
DEFAULT_RENEWAL_ATTEMPTS = {
    'first_attempt': 7,
    'second_attempt': 24,
    'final_notice': 3,
}

DEFAULT_MODULE_SETTINGS = {
    'auto_renewal': True,
    'notifications': True,
    'upgrade_alerts': False,
}

DEFAULT_NOTIFICATION_SETTINGS = {
    'email': True,
    'sms': False,
    'in_app': True,
}
