"""
Work Order Business Logic
Proforma to completion lifecycle, payments, signatures, disputes and team access
"""
import copy
from datetime import timedelta

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import SequenceGenerator, new_id
from resolution_desk.core.money import compute_fee_breakdown, format_inr, percentage, split_payment_terms
from resolution_desk.core.pagination import in_amount_range, in_date_range, paginate, sort_records
from resolution_desk.core.validators import (
    ensure_choice, ensure_choices, is_valid_email, parse_date, require_fields,
)
from .fixtures import DEMO_WORK_ORDERS
from .models import (
    FEEDBACK_STAGES, MILESTONE_STATUSES, OPEN_STATUSES, PARTY_TYPES, TRANSITIONS,
    ActivityType, DisputeReason, FeeAdviceStatus, PaymentTermStatus, SignatureType,
    WorkOrderStatus, WorkOrderTabAccess, WorkOrderType,
)

TEMP_PREFIX = '@TEMP'

SORT_FIELDS = ('created_at', 'updated_at', 'wo_number', 'title', 'status', 'total_amount')
SORT_ORDERS = ('asc', 'desc')

DEFAULT_PAYMENT_TERMS = [{'stage_label': 'Full Payment', 'amount_percentage': 100}]

# States in which the provider is still working on the order
ACTIVE_STATUSES = (
    WorkOrderStatus.IN_PROGRESS,
    WorkOrderStatus.INFORMATION_SOUGHT,
    WorkOrderStatus.INFORMATION_PENDING,
    WorkOrderStatus.ON_HOLD,
)

RESOLVABLE_TO = (
    WorkOrderStatus.IN_PROGRESS,
    WorkOrderStatus.ON_HOLD,
    WorkOrderStatus.COMPLETED,
    WorkOrderStatus.CANCELLED,
)


@register_component('work_orders')
class WorkOrderService(DeskService):
    """Service for work orders between seekers and providers"""

    module = 'work_orders'

    def __init__(self, config=None, audit=None, clock=None):
        super().__init__(config, audit, clock)
        self.work_orders = {}
        self.wo_numbers = SequenceGenerator('WO')
        self.receipt_numbers = SequenceGenerator('MR')
        self.fee_advice_numbers = SequenceGenerator('FA')

    def seed(self):
        for work_order in copy.deepcopy(DEMO_WORK_ORDERS):
            self.work_orders[work_order['id']] = work_order
            self.wo_numbers.observe(work_order['wo_number'])
            for receipt in work_order['financials']['money_receipts']:
                self.receipt_numbers.observe(receipt.get('receipt_number'))
            for advice in work_order['financials']['fee_advices']:
                self.fee_advice_numbers.observe(advice.get('request_number'))

    # ── Lookups ─────────────────────────────────────────────────

    def get_work_order(self, work_order_id):
        work_order = self.work_orders.get(work_order_id)
        if work_order is None:
            raise NotFoundError('Work order', work_order_id)
        return work_order

    def get_work_orders_for_seeker(self, seeker_id=None, page=1, limit=10, **filters):
        return self._list_for_party('service_seeker', seeker_id, page, limit, **filters)

    def get_work_orders_for_provider(self, provider_id=None, page=1, limit=10, **filters):
        return self._list_for_party('service_provider', provider_id, page, limit, **filters)

    def _list_for_party(self, party_key, party_id, page, limit, status=None, wo_number=None,
                        reference_number=None, types=None, date_from=None, date_to=None,
                        amount_min=None, amount_max=None, sort_by='created_at', sort_order='desc'):
        sort_by = sort_by or 'created_at'
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"sort_by must be one of: {', '.join(SORT_FIELDS)}")
        if sort_order not in SORT_ORDERS:
            raise ValidationError(f"sort_order must be one of: {', '.join(SORT_ORDERS)}")
        orders = list(self.work_orders.values())
        if party_id:
            orders = [wo for wo in orders if wo[party_key]['id'] == party_id]
        if status:
            orders = [wo for wo in orders if wo['status'] in status]
        if wo_number:
            orders = [wo for wo in orders if wo_number.lower() in wo['wo_number'].lower()]
        if reference_number:
            orders = [wo for wo in orders
                      if reference_number.lower() in (wo.get('reference_number') or '').lower()]
        if types:
            orders = [wo for wo in orders if wo['type'] in types]
        if date_from or date_to:
            orders = [wo for wo in orders if in_date_range(wo['created_at'], date_from, date_to)]
        if amount_min is not None or amount_max is not None:
            orders = [wo for wo in orders
                      if in_amount_range(wo['financials']['total_amount'], amount_min, amount_max)]

        descending = sort_order == 'desc'
        if sort_by == 'total_amount':
            orders.sort(key=lambda wo: wo['financials']['total_amount'], reverse=descending)
        else:
            orders = sort_records(orders, sort_by, descending=descending)
        return paginate(orders, page, limit)

    def get_work_order_stats(self, party_id=None, party_type='seeker'):
        if party_type not in PARTY_TYPES:
            raise ValidationError(f"party_type must be one of: {', '.join(PARTY_TYPES)}")
        party_key = 'service_seeker' if party_type == 'seeker' else 'service_provider'
        orders = [wo for wo in self.work_orders.values()
                  if not party_id or wo[party_key]['id'] == party_id]
        today = self.today()
        return {
            'total': len(orders),
            'open': sum(1 for wo in orders if wo['status'] in OPEN_STATUSES),
            'in_progress': sum(1 for wo in orders if wo['status'] == WorkOrderStatus.IN_PROGRESS),
            'completed': sum(1 for wo in orders if wo['status'] == WorkOrderStatus.COMPLETED),
            'disputed': sum(1 for wo in orders if wo['status'] == WorkOrderStatus.DISPUTED),
            'overdue': sum(1 for wo in orders if self._is_overdue(wo, today)),
            'pending_payment': sum(1 for wo in orders if wo['status'] == WorkOrderStatus.PAYMENT_PENDING),
        }

    @staticmethod
    def _is_overdue(work_order, today):
        expected = work_order['timeline'].get('expected_completion_date')
        if not expected or work_order['status'] == WorkOrderStatus.COMPLETED:
            return False
        return parse_date(expected, 'expected_completion_date') < today

    # ── Status ──────────────────────────────────────────────────

    def _add_activity(self, work_order, activity_type, description, performed_by=None,
                      performed_by_type='system', metadata=None):
        activity = {
            'id': new_id('act'),
            'work_order_id': work_order['id'],
            'type': activity_type.value,
            'description': description,
            'performed_by': performed_by or 'system',
            'performed_by_type': performed_by_type,
            'timestamp': self.now_iso(),
        }
        if metadata:
            activity['metadata'] = metadata
        work_order['activities'].append(activity)
        work_order['updated_at'] = activity['timestamp']
        return activity

    def _transition(self, work_order, new_status, actor=None, actor_type='system'):
        current = WorkOrderStatus(work_order['status'])
        new_status = WorkOrderStatus(new_status)
        if new_status not in TRANSITIONS[current]:
            raise ConflictError(f'Cannot move work order {work_order["wo_number"]} '
                                f'from {current.value} to {new_status.value}')
        work_order['status'] = new_status.value
        label = new_status.value.replace('_', ' ').title()
        self._add_activity(work_order, ActivityType.STATUS_CHANGED, f'Status changed to {label}',
                           actor, actor_type, {'from': current.value, 'to': new_status.value})
        self._record('status_changed', f'{work_order["wo_number"]}: {current.value} -> {new_status.value}',
                     reference=work_order['id'], actor=actor)

    def update_work_order_status(self, work_order_id, status, actor=None, actor_type='system'):
        new_status = ensure_choice(status, WorkOrderStatus, 'status')
        work_order = self.get_work_order(work_order_id)
        with self._lock:
            self._transition(work_order, new_status, actor, actor_type)
        return work_order

    # ── Creation ────────────────────────────────────────────────

    def _fee_breakdown(self, financials):
        rates = self.fee_rates()
        return compute_fee_breakdown(
            financials.get('professional_fee'),
            reimbursements=financials.get('reimbursements', 0),
            regulatory_payouts=financials.get('regulatory_payouts', 0),
            ope=financials.get('ope', 0),
            platform_rate=rates['platform_rate'],
            gst_rate=rates['gst_rate'],
        )

    def _build_financials(self, breakdown, payment_terms):
        terms = split_payment_terms(breakdown['total_amount'], payment_terms or DEFAULT_PAYMENT_TERMS)
        for term in terms:
            term['id'] = new_id('pt')
            term['status'] = PaymentTermStatus.BALANCE_DUE.value
        financials = dict(breakdown)
        financials.update({'payment_terms': terms, 'money_receipts': [], 'fee_advices': []})
        return financials

    @staticmethod
    def _build_milestones(milestones):
        errors = []
        built = []
        for index, milestone in enumerate(milestones or []):
            missing = require_fields(milestone, ('title', 'delivery_date'))
            errors.extend(f'milestones[{index}].{message}' for message in missing)
            if missing:
                continue
            try:
                parse_date(milestone['delivery_date'], f'milestones[{index}].delivery_date')
            except ValidationError as e:
                errors.append(e.message)
            built.append({
                'id': new_id('ms'),
                'title': milestone['title'],
                'description': milestone.get('description', ''),
                'delivery_date': milestone['delivery_date'],
                'status': 'pending',
                'documents': [],
                'comments': [],
            })
        if errors:
            raise ValidationError(errors)
        return built

    def _new_work_order(self, **fields):
        now = self.now_iso()
        work_order = {
            'id': new_id('wo'),
            'wo_number': new_id(TEMP_PREFIX),
            'status': WorkOrderStatus.PROFORMA.value,
            'documents': [],
            'information_requests': [],
            'feedbacks': [],
            'disputes': [],
            'team_members': [],
            'activities': [],
            'signatures': {'seeker_signed': False, 'provider_signed': False},
            'created_at': now,
            'updated_at': now,
        }
        work_order.update(fields)
        return work_order

    def create_work_order(self, request, actor=None):
        """Provider-initiated proforma work order

        The order carries a temporary ``@TEMP-`` number until the first
        payment is received.
        """
        errors = require_fields(request, ('client_email', 'title', 'scope_of_work'))
        if request.get('client_email') and not is_valid_email(request['client_email']):
            errors.append('client_email is not a valid e-mail address')
        timeline = request.get('timeline') or {}
        errors.extend(f'timeline.{m}' for m in require_fields(timeline, ('start_date', 'expected_completion_date')))
        if not isinstance(request.get('financials'), dict):
            errors.append('financials.professional_fee is required')
        if errors:
            raise ValidationError(errors)

        start = parse_date(timeline['start_date'], 'timeline.start_date')
        expected = parse_date(timeline['expected_completion_date'], 'timeline.expected_completion_date')
        if expected < start:
            raise ValidationError('timeline.expected_completion_date must not be before start_date')

        financials = self._build_financials(self._fee_breakdown(request['financials']),
                                            request.get('payment_terms'))
        milestones = self._build_milestones(request.get('milestones'))

        provider = request.get('service_provider') or {}
        provider_id = provider.get('id') or actor
        work_order = self._new_work_order(
            reference_number=request.get('reference_number'),
            type=WorkOrderType.SERVICE_PROVIDER_INITIATED.value,
            service_seeker={
                'id': request.get('client_id') or request['client_email'],
                'name': request.get('client_name') or request['client_email'],
                'email': request['client_email'],
                'address': request.get('client_address', ''),
            },
            service_provider={
                'id': provider_id,
                'name': provider.get('name', provider_id),
                'email': provider.get('email', ''),
                'address': provider.get('address', ''),
            },
            title=request['title'],
            scope_of_work=request['scope_of_work'],
            deliverables=list(request.get('deliverables') or []),
            timeline={'start_date': start.isoformat(), 'expected_completion_date': expected.isoformat()},
            financials=financials,
            milestones=milestones,
            created_by=provider_id,
            created_by_type='provider',
        )
        with self._lock:
            self.work_orders[work_order['id']] = work_order
            self._add_activity(work_order, ActivityType.WORK_ORDER_CREATED,
                               'Proforma work order created', provider_id, 'provider')
        self._record('work_order_created', f"Proforma {work_order['wo_number']} created for "
                     f"{work_order['service_seeker']['name']}", reference=work_order['id'], actor=actor)
        return work_order

    def create_work_order_from_bid(self, bid, service_request, payment_terms=None, actor=None):
        """Seeker-initiated proforma built from an accepted bid"""
        if bid.get('status') != 'accepted':
            raise ConflictError(f"Bid {bid.get('bid_number')} has not been accepted")
        if bid.get('service_request_id') != service_request.get('id'):
            raise ValidationError('Bid does not belong to this service request')
        if service_request.get('status') != 'bid_accepted':
            raise ConflictError(f"No accepted bid on this request (status: {service_request.get('status')})")

        with self._lock:
            for existing in self.work_orders.values():
                if existing.get('bid_id') == bid['id'] and existing['status'] != WorkOrderStatus.CANCELLED:
                    raise ConflictError(f"Work order already exists for bid {bid['bid_number']}")

            today = self.today()
            expected = bid.get('delivery_date') or (today + timedelta(days=30)).isoformat()
            breakdown = {k: bid['financials'][k] for k in ('professional_fee', 'platform_fee', 'gst',
                                                           'reimbursements', 'regulatory_payouts', 'ope',
                                                           'total_amount')}
            terms = payment_terms
            if not terms and bid['financials'].get('milestones'):
                terms = [{'stage_label': m.get('title') or m.get('stage_label'),
                          'amount_percentage': m.get('amount_percentage'),
                          'due_date': m.get('due_date')}
                         for m in bid['financials']['milestones']]
            seeker_id = service_request.get('created_by')
            work_order = self._new_work_order(
                type=WorkOrderType.SERVICE_SEEKER_INITIATED.value,
                service_request_id=service_request['id'],
                bid_id=bid['id'],
                reference_number=service_request.get('srn_number'),
                service_seeker={'id': seeker_id, 'name': seeker_id, 'email': '', 'address': ''},
                service_provider={
                    'id': bid['provider_id'],
                    'name': bid.get('provider_name', bid['provider_id']),
                    'email': '',
                    'address': bid.get('provider_profile', {}).get('location', ''),
                },
                title=service_request.get('title', ''),
                scope_of_work=service_request.get('scope_of_work', ''),
                deliverables=[],
                timeline={'start_date': today.isoformat(), 'expected_completion_date': expected},
                financials=self._build_financials(breakdown, terms),
                milestones=[],
                created_by=seeker_id,
                created_by_type='seeker',
            )
            self.work_orders[work_order['id']] = work_order
            self._add_activity(work_order, ActivityType.WORK_ORDER_CREATED,
                               'Work Order created from accepted bid', seeker_id, 'seeker',
                               {'bid_id': bid['id']})
        self._record('work_order_created', f"Work order {work_order['wo_number']} created from bid "
                     f"{bid['bid_number']}", reference=work_order['id'], actor=actor or seeker_id)
        return work_order

    # ── Payment and signatures ──────────────────────────────────

    def make_payment(self, work_order_id, amount, mode='Bank Transfer', paid_by=None):
        """Record a payment, settle terms in order and issue the permanent number"""
        if not isinstance(amount, (int, float)) or isinstance(amount, bool) or amount <= 0:
            raise ValidationError('amount must be a positive number')
        work_order = self.get_work_order(work_order_id)
        now = self.now()
        financials = work_order['financials']
        with self._lock:
            if work_order['status'] not in (WorkOrderStatus.PROFORMA, WorkOrderStatus.PAYMENT_PENDING):
                raise ConflictError(f"Payment is not expected (status: {work_order['status']})")
            receipt = {
                'id': new_id('mr'),
                'receipt_number': self.receipt_numbers.next(now.year),
                'date': now.date().isoformat(),
                'amount': amount,
                'payment_mode': mode,
                'status': PaymentTermStatus.PAID.value,
                'uploaded_by': paid_by,
            }
            financials['money_receipts'].append(receipt)

            paid_total = sum(r['amount'] for r in financials['money_receipts'])
            covered = 0
            for term in financials['payment_terms']:
                covered += term['amount']
                if term['status'] != PaymentTermStatus.PAID and covered <= paid_total:
                    term['status'] = PaymentTermStatus.PAID.value
                    term['paid_date'] = receipt['date']

            if work_order['wo_number'].startswith(TEMP_PREFIX):
                work_order['wo_number'] = self.wo_numbers.next(now.year)
            self._add_activity(work_order, ActivityType.PAYMENT_MADE,
                               f"Payment of {format_inr(amount)} received ({receipt['receipt_number']})",
                               paid_by, 'seeker', {'receipt_id': receipt['id']})
            self._transition(work_order, WorkOrderStatus.SIGNATURE_PENDING, paid_by, 'seeker')
        return work_order

    def sign_work_order(self, work_order_id, signature_type, party, signed_by=None):
        signature_type = ensure_choice(signature_type, SignatureType, 'signature_type')
        if party not in PARTY_TYPES:
            raise ValidationError(f"party must be one of: {', '.join(PARTY_TYPES)}")
        work_order = self.get_work_order(work_order_id)
        signatures = work_order['signatures']
        with self._lock:
            if work_order['status'] != WorkOrderStatus.SIGNATURE_PENDING:
                raise ConflictError(f"Work order is not awaiting signatures (status: {work_order['status']})")
            if signatures.get(f'{party}_signed'):
                raise ConflictError(f'Work order already signed by the {party}')
            signatures[f'{party}_signed'] = True
            signatures[f'{party}_signed_at'] = self.now_iso()
            signatures[f'{party}_signature_type'] = signature_type.value
            self._add_activity(work_order, ActivityType.SIGNATURE_COMPLETED,
                               f'Signed by {party} ({signature_type.value})', signed_by, party)
            if signatures.get('seeker_signed') and signatures.get('provider_signed'):
                self._transition(work_order, WorkOrderStatus.IN_PROGRESS, signed_by, party)
        return work_order

    def mark_complete(self, work_order_id, actor=None, actor_type='provider'):
        work_order = self.get_work_order(work_order_id)
        with self._lock:
            self._transition(work_order, WorkOrderStatus.COMPLETED, actor, actor_type)
            work_order['timeline']['actual_completion_date'] = self.today().isoformat()
            work_order['completed_at'] = self.now_iso()
        return work_order

    # ── Disputes and feedback ───────────────────────────────────

    def raise_dispute(self, work_order_id, dispute):
        errors = require_fields(dispute, ('reason', 'description', 'raised_by'))
        if errors:
            raise ValidationError(errors)
        reason = ensure_choice(dispute['reason'], DisputeReason, 'reason')
        raised_by_type = dispute.get('raised_by_type', 'seeker')
        if raised_by_type not in PARTY_TYPES:
            raise ValidationError(f"raised_by_type must be one of: {', '.join(PARTY_TYPES)}")

        work_order = self.get_work_order(work_order_id)
        record = {
            'id': new_id('disp'),
            'work_order_id': work_order_id,
            'raised_by': dispute['raised_by'],
            'raised_by_type': raised_by_type,
            'reason': reason.value,
            'description': dispute['description'],
            'supporting_documents': copy.deepcopy(dispute.get('supporting_documents') or []),
            'messages': [],
            'status': 'active',
            'created_at': self.now_iso(),
        }
        with self._lock:
            self._transition(work_order, WorkOrderStatus.DISPUTED, dispute['raised_by'], raised_by_type)
            work_order['disputes'].append(record)
            self._add_activity(work_order, ActivityType.DISPUTE_RAISED, f'Dispute raised: {reason.value}',
                               dispute['raised_by'], raised_by_type, {'dispute_id': record['id']})
        return record

    def resolve_dispute(self, work_order_id, dispute_id, resolution, resume_status='in_progress',
                        actor=None):
        """Close a dispute; the order resumes once no dispute is active"""
        if not resolution:
            raise ValidationError('resolution is required')
        resume = ensure_choice(resume_status, WorkOrderStatus, 'resume_status')
        if resume not in RESOLVABLE_TO:
            raise ValidationError(f"resume_status must be one of: {', '.join(s.value for s in RESOLVABLE_TO)}")
        work_order = self.get_work_order(work_order_id)
        dispute = self._find(work_order['disputes'], dispute_id, 'Dispute')
        with self._lock:
            if dispute['status'] != 'active':
                raise ConflictError('Dispute is not active')
            dispute['status'] = 'resolved'
            dispute['resolution'] = resolution
            dispute['resolved_at'] = self.now_iso()
            if not any(d['status'] == 'active' for d in work_order['disputes']):
                self._transition(work_order, resume, actor, 'admin')
        return dispute

    def provide_feedback(self, work_order_id, feedback):
        errors = require_fields(feedback, ('provided_by', 'review_summary'))
        rating = feedback.get('rating')
        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            errors.append('rating must be a whole number from 1 to 5')
        stage = feedback.get('stage', 'during_execution')
        if stage not in FEEDBACK_STAGES:
            errors.append(f"stage must be one of: {', '.join(FEEDBACK_STAGES)}")
        if errors:
            raise ValidationError(errors)

        work_order = self.get_work_order(work_order_id)
        record = {
            'id': new_id('fb'),
            'work_order_id': work_order_id,
            'provided_by': feedback['provided_by'],
            'provided_by_type': feedback.get('provided_by_type', 'seeker'),
            'stage': stage,
            'rating': rating,
            'review_summary': feedback['review_summary'],
            'suggestions': feedback.get('suggestions'),
            'concerns': list(feedback.get('concerns') or []),
            'timestamp': self.now_iso(),
        }
        with self._lock:
            if stage == 'on_completion' and work_order['status'] != WorkOrderStatus.COMPLETED:
                raise ConflictError('Completion feedback needs a completed work order')
            work_order['feedbacks'].append(record)
            self._add_activity(work_order, ActivityType.FEEDBACK_PROVIDED, f'{rating} star feedback',
                               record['provided_by'], record['provided_by_type'])
        return record

    # ── Fee advices ─────────────────────────────────────────────

    def raise_fee_advice(self, work_order_id, advice, created_by=None):
        """Provider request for an additional fee"""
        errors = require_fields(advice, ('description',))
        amount = advice.get('amount')
        if not isinstance(amount, (int, float)) or isinstance(amount, bool) or amount <= 0:
            errors.append('amount must be a positive number')
        if errors:
            raise ValidationError(errors)
        work_order = self.get_work_order(work_order_id)
        now = self.now()
        with self._lock:
            if work_order['status'] in (WorkOrderStatus.REJECTED, WorkOrderStatus.CANCELLED):
                raise ConflictError(f"Work order is {work_order['status']}")
            record = {
                'id': new_id('fa'),
                'request_number': self.fee_advice_numbers.next(now.year),
                'work_order_id': work_order_id,
                'date': now.date().isoformat(),
                'amount': amount,
                'description': advice['description'],
                'task_description': advice.get('task_description'),
                'deliverables': list(advice.get('deliverables') or []),
                'status': FeeAdviceStatus.PENDING.value,
                'created_by': created_by or work_order['service_provider']['id'],
            }
            work_order['financials']['fee_advices'].append(record)
            self._add_activity(work_order, ActivityType.FEE_ADVICE_RAISED,
                               f"Fee advice {record['request_number']} raised for {format_inr(amount)}",
                               record['created_by'], 'provider')
        self._record('fee_advice_raised', f"Fee advice {record['request_number']} on {work_order['wo_number']}",
                     reference=work_order_id, actor=record['created_by'])
        return record

    def _pending_fee_advice(self, work_order, advice_id):
        advice = self._find(work_order['financials']['fee_advices'], advice_id, 'Fee advice')
        if advice['status'] != FeeAdviceStatus.PENDING:
            raise ConflictError(f"Fee advice already reviewed (status: {advice['status']})")
        return advice

    def accept_fee_advice(self, work_order_id, advice_id, reviewed_by=None):
        work_order = self.get_work_order(work_order_id)
        with self._lock:
            advice = self._pending_fee_advice(work_order, advice_id)
            advice['status'] = FeeAdviceStatus.ACCEPTED.value
            advice['reviewed_by'] = reviewed_by
            advice['reviewed_at'] = self.now_iso()
        self._record('fee_advice_accepted', f"Fee advice {advice['request_number']} accepted",
                     reference=work_order_id, actor=reviewed_by)
        return advice

    def reject_fee_advice(self, work_order_id, advice_id, reason, reviewed_by=None):
        if not reason or not str(reason).strip():
            raise ValidationError('rejection reason is required')
        work_order = self.get_work_order(work_order_id)
        with self._lock:
            advice = self._pending_fee_advice(work_order, advice_id)
            advice['status'] = FeeAdviceStatus.REJECTED.value
            advice['rejection_reason'] = reason
            advice['reviewed_by'] = reviewed_by
            advice['reviewed_at'] = self.now_iso()
        self._record('fee_advice_rejected', f"Fee advice {advice['request_number']} rejected: {reason}",
                     reference=work_order_id, actor=reviewed_by)
        return advice

    # ── Information requests ────────────────────────────────────

    def raise_information_request(self, work_order_id, request, requested_by=None):
        errors = require_fields(request, ('title', 'description'))
        request_type = request.get('type', 'text')
        if request_type not in ('text', 'document'):
            errors.append('type must be one of: text, document')
        if errors:
            raise ValidationError(errors)
        work_order = self.get_work_order(work_order_id)
        record = {
            'id': new_id('ir'),
            'type': request_type,
            'title': request['title'],
            'description': request['description'],
            'requested_by': requested_by,
            'requested_at': self.now_iso(),
            'status': 'pending',
        }
        with self._lock:
            if work_order['status'] == WorkOrderStatus.IN_PROGRESS:
                self._transition(work_order, WorkOrderStatus.INFORMATION_SOUGHT, requested_by, 'provider')
            elif work_order['status'] not in (WorkOrderStatus.INFORMATION_SOUGHT,
                                              WorkOrderStatus.INFORMATION_PENDING):
                raise ConflictError(f"Information can only be sought while work is in progress "
                                    f"(status: {work_order['status']})")
            work_order['information_requests'].append(record)
        return record

    def respond_to_information_request(self, work_order_id, request_id, response,
                                       documents=None, responded_by=None):
        if not response and not documents:
            raise ValidationError('response or documents are required')
        work_order = self.get_work_order(work_order_id)
        record = self._find(work_order['information_requests'], request_id, 'Information request')
        with self._lock:
            if record['status'] != 'pending':
                raise ConflictError('Information request already answered')
            record['status'] = 'responded'
            record['response'] = response
            record['response_documents'] = copy.deepcopy(documents or [])
            record['responded_at'] = self.now_iso()
            pending = any(r['status'] == 'pending' for r in work_order['information_requests'])
            if not pending and work_order['status'] in (WorkOrderStatus.INFORMATION_SOUGHT,
                                                        WorkOrderStatus.INFORMATION_PENDING):
                self._transition(work_order, WorkOrderStatus.IN_PROGRESS, responded_by, 'seeker')
        return record

    # ── Milestones, team and activity ───────────────────────────

    def update_milestone_status(self, work_order_id, milestone_id, status, actor=None):
        if status not in MILESTONE_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(MILESTONE_STATUSES)}")
        work_order = self.get_work_order(work_order_id)
        milestone = self._find(work_order['milestones'], milestone_id, 'Milestone')
        with self._lock:
            milestone['status'] = status
            if status == 'completed':
                milestone['completed_at'] = self.now_iso()
            self._add_activity(work_order, ActivityType.STATUS_CHANGED,
                               f"Milestone '{milestone['title']}' marked {status}", actor, 'provider')
        return milestone

    def get_progress(self, work_order_id):
        """Completed milestones as a percentage of all milestones"""
        milestones = self.get_work_order(work_order_id)['milestones']
        completed = sum(1 for m in milestones if m['status'] == 'completed')
        return {
            'work_order_id': work_order_id,
            'total_milestones': len(milestones),
            'completed_milestones': completed,
            'percentage': percentage(completed, len(milestones)),
        }

    def allocate_team_member(self, work_order_id, member, access_tabs, allocated_by=None):
        errors = require_fields(member, ('member_id', 'member_name'))
        if errors:
            raise ValidationError(errors)
        tabs = ensure_choices(access_tabs or [], WorkOrderTabAccess, 'access_tabs')
        if not tabs:
            raise ValidationError('at least one access tab is required')
        work_order = self.get_work_order(work_order_id)
        access = {
            'member_id': member['member_id'],
            'member_name': member['member_name'],
            'member_email': member.get('member_email', ''),
            'access_tabs': [tab.value for tab in tabs],
            'allocated_by': allocated_by,
            'allocated_at': self.now_iso(),
            'status': 'active',
        }
        with self._lock:
            work_order['team_members'] = [m for m in work_order['team_members']
                                          if m['member_id'] != member['member_id']]
            work_order['team_members'].append(access)
            self._add_activity(work_order, ActivityType.TEAM_MEMBER_ALLOCATED,
                               f"{member['member_name']} allocated", allocated_by, 'provider')
        return access

    def revoke_team_member(self, work_order_id, member_id, actor=None):
        work_order = self.get_work_order(work_order_id)
        for access in work_order['team_members']:
            if access['member_id'] == member_id and access['status'] == 'active':
                with self._lock:
                    access['status'] = 'inactive'
                    access['revoked_at'] = self.now_iso()
                self._record('team_member_revoked', f'{member_id} removed from {work_order["wo_number"]}',
                             reference=work_order_id, actor=actor)
                return access
        raise NotFoundError('Team member', member_id)

    def get_activities(self, work_order_id):
        activities = self.get_work_order(work_order_id)['activities']
        return sorted(activities, key=lambda a: a['timestamp'], reverse=True)

    @staticmethod
    def _find(items, item_id, kind):
        for item in items:
            if item['id'] == item_id:
                return item
        raise NotFoundError(kind, item_id)

