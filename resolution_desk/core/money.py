"""
Fee arithmetic shared by bids, work orders and claims

Amounts are whole rupees. Rounding is half-up, matching the figures the
front end has always shown (15000 fee -> 1500 platform fee -> 2970 GST).
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from .errors import ValidationError

RUPEE = '₹'


def round_half_up(value):
    """Round a non-negative amount to the nearest whole rupee, halves up"""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def compute_fee_breakdown(professional_fee, reimbursements=0, regulatory_payouts=0, ope=0,
                          platform_rate=0.10, gst_rate=0.18):
    """Derive platform fee, GST and total from the professional fee

    GST is levied on the professional fee plus the platform fee.
    Reimbursements, regulatory payouts and out-of-pocket expenses pass
    through untaxed.
    """
    components = {
        'professional_fee': professional_fee,
        'reimbursements': reimbursements or 0,
        'regulatory_payouts': regulatory_payouts or 0,
        'ope': ope or 0,
    }
    errors = []
    for name, value in components.items():
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            errors.append(f'{name} must be a number')
        elif value < 0:
            errors.append(f'{name} must not be negative')
    if errors:
        raise ValidationError(errors)

    fee = round_half_up(professional_fee)
    platform_fee = round_half_up(fee * platform_rate)
    gst = round_half_up((fee + platform_fee) * gst_rate)
    reimbursements = round_half_up(components['reimbursements'])
    regulatory_payouts = round_half_up(components['regulatory_payouts'])
    ope = round_half_up(components['ope'])

    return {
        'professional_fee': fee,
        'platform_fee': platform_fee,
        'gst': gst,
        'reimbursements': reimbursements,
        'regulatory_payouts': regulatory_payouts,
        'ope': ope,
        'total_amount': fee + platform_fee + gst + reimbursements + regulatory_payouts + ope,
    }


def split_payment_terms(total, terms):
    """Split a total across staged payment terms by percentage

    The last term absorbs the rounding remainder so the amounts always add
    up to the total.
    """
    if not terms:
        raise ValidationError('At least one payment term is required')

    errors = []
    for index, term in enumerate(terms):
        pct = term.get('amount_percentage')
        if not isinstance(pct, (int, float)) or pct <= 0:
            errors.append(f'terms[{index}].amount_percentage must be positive')
        if not term.get('stage_label'):
            errors.append(f'terms[{index}].stage_label is required')
    if errors:
        raise ValidationError(errors)

    if round(sum(term['amount_percentage'] for term in terms), 6) != 100:
        raise ValidationError('Payment term percentages must add up to 100')

    split = []
    allocated = 0
    for index, term in enumerate(terms):
        if index == len(terms) - 1:
            amount = total - allocated
        else:
            amount = round_half_up(total * term['amount_percentage'] / 100)
        allocated += amount
        split.append({
            'stage_label': term['stage_label'],
            'amount_percentage': term['amount_percentage'],
            'amount': amount,
            'due_date': term.get('due_date'),
        })
    return split


def simple_interest(principal, rate, from_date, to_date):
    """Simple interest on a principal at an annual rate, day-count 365"""
    if isinstance(from_date, str):
        from_date = date.fromisoformat(from_date)
    if isinstance(to_date, str):
        to_date = date.fromisoformat(to_date)
    days = (to_date - from_date).days
    if days <= 0 or principal <= 0:
        return 0
    return round_half_up(principal * rate * days / 365)


def format_inr(amount):
    """Format a rupee amount with Indian digit grouping: 5000000 -> ₹50,00,000"""
    value = round_half_up(abs(amount))
    digits = str(value)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ','.join(groups) + ',' + tail
    sign = '-' if amount < 0 else ''
    return f'{sign}{RUPEE}{digits}'


def percentage(part, whole):
    """Integer percentage for progress bars, clamped to 0..100"""
    if not whole:
        return 0
    return max(0, min(100, round_half_up(part * 100 / whole)))
