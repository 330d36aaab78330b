"""
Service Request Business Logic
Requests, bids, negotiation threads, queries and the provider opportunity view
"""
import copy
import csv
import io
import logging
from datetime import timedelta

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import SequenceGenerator, new_id
from resolution_desk.core.money import compute_fee_breakdown
from resolution_desk.core.pagination import in_amount_range, paginate, sort_records
from resolution_desk.core.validators import (
    ensure_choice, ensure_choices, parse_date, require_fields,
)
from .fixtures import DEMO_BIDS, DEMO_SERVICE_REQUESTS
from .models import (
    ACTIVE_BID_STATUSES, BIDDABLE_STATUSES, NEGOTIATION_REQUIREMENTS, SUGGESTION_RULES,
    BidStatus, NegotiationReason, PaymentStructure, ProfessionalType, ServiceRequestStatus,
    ServiceType,
)

logger = logging.getLogger(__name__)

# Fields a seeker may not overwrite through update_service_request
PROTECTED_REQUEST_FIELDS = ('id', 'srn_number', 'status', 'created_by', 'created_at')

REQUEST_SORT_FIELDS = ('created_at', 'updated_at', 'deadline', 'title', 'srn_number', 'status')
SORT_ORDERS = ('asc', 'desc')

# Once any of these is reached the request is locked for edits
LOCKED_REQUEST_STATUSES = (
    ServiceRequestStatus.BID_ACCEPTED,
    ServiceRequestStatus.PAYMENT_PENDING,
    ServiceRequestStatus.WORK_ORDER_ISSUED,
    ServiceRequestStatus.IN_PROGRESS,
    ServiceRequestStatus.COMPLETED,
    ServiceRequestStatus.CLOSED,
    ServiceRequestStatus.CANCELLED,
)

REQUEST_EXPORT_COLUMNS = ('srn_number', 'title', 'status', 'service_types', 'budget_min',
                          'budget_max', 'deadline', 'created_by', 'created_at', 'bid_count')
BID_EXPORT_COLUMNS = ('bid_number', 'provider_name', 'status', 'professional_fee', 'platform_fee',
                      'gst', 'total_amount', 'payment_structure', 'delivery_date', 'submitted_at')


@register_component('service_requests')
class ServiceRequestService(DeskService):
    """Service for seeker requests and the provider bids placed against them"""

    module = 'service_requests'

    def __init__(self, config=None, audit=None, clock=None):
        super().__init__(config, audit, clock)
        self.requests = {}
        self.bids = {}
        self.negotiations = {}
        self.queries = {}
        self.not_interested = {}
        self.srn_numbers = SequenceGenerator('SRN')
        self.bid_numbers = SequenceGenerator('BID')

    def seed(self):
        for request in copy.deepcopy(DEMO_SERVICE_REQUESTS):
            self.requests[request['id']] = request
            self.srn_numbers.observe(request['srn_number'])
        for bid in copy.deepcopy(DEMO_BIDS):
            self.bids[bid['id']] = bid
            self.bid_numbers.observe(bid['bid_number'])

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

    # ── Service requests ────────────────────────────────────────

    def _validate_request(self, payload, creating):
        errors = []
        if creating:
            errors.extend(require_fields(payload, ('title',)))
        if 'service_types' in payload:
            try:
                ensure_choices(payload['service_types'], ServiceType, 'service_types')
            except ValidationError as e:
                errors.append(e.message)
        if 'service_category' in payload:
            try:
                ensure_choices(payload['service_category'], ProfessionalType, 'service_category')
            except ValidationError as e:
                errors.append(e.message)

        budget = payload.get('budget_range')
        if budget and not payload.get('budget_not_clear'):
            low, high = budget.get('min'), budget.get('max')
            if any(v is not None and (not isinstance(v, (int, float)) or v < 0) for v in (low, high)):
                errors.append('budget_range values must be non-negative numbers')
            elif low is not None and high is not None and low > high:
                errors.append('budget_range.min must not exceed budget_range.max')

        if payload.get('deadline'):
            try:
                parse_date(payload['deadline'], 'deadline')
            except ValidationError as e:
                errors.append(e.message)
        if errors:
            raise ValidationError(errors)

    def get_service_request(self, request_id):
        request = self.requests.get(request_id)
        if request is None:
            raise NotFoundError('Service request', request_id)
        return request

    def get_service_requests(self, status=None, srn_number=None, service_types=None, created_by=None,
                             budget_min=None, budget_max=None, sort_by='created_at', sort_order='desc',
                             page=1, limit=10):
        """Filtered, sorted and paginated list of service requests"""
        sort_by = sort_by or 'created_at'
        if sort_by not in REQUEST_SORT_FIELDS:
            raise ValidationError(f"sort_by must be one of: {', '.join(REQUEST_SORT_FIELDS)}")
        if sort_order not in SORT_ORDERS:
            raise ValidationError(f"sort_order must be one of: {', '.join(SORT_ORDERS)}")
        requests = list(self.requests.values())
        if status:
            requests = [r for r in requests if r['status'] in status]
        if srn_number:
            term = srn_number.lower()
            requests = [r for r in requests if term in r.get('srn_number', '').lower()]
        if service_types:
            wanted = set(service_types)
            requests = [r for r in requests if wanted & set(r.get('service_types', []))]
        if created_by:
            requests = [r for r in requests if r.get('created_by') == created_by]
        if budget_min is not None or budget_max is not None:
            requests = [r for r in requests if self._budget_overlaps(r, budget_min, budget_max)]
        requests = sort_records(requests, sort_by, descending=sort_order == 'desc')
        return paginate(requests, page, limit)

    @staticmethod
    def _budget_overlaps(request, low, high):
        budget = request.get('budget_range') or {}
        if request.get('budget_not_clear') or not budget:
            return False
        if low is not None and budget.get('max') is not None and budget['max'] < low:
            return False
        if high is not None and budget.get('min') is not None and budget['min'] > high:
            return False
        return True

    def create_service_request(self, payload, actor=None):
        """Create a draft request with an SRN number and a default deadline"""
        self._validate_request(payload, creating=True)
        now = self.now()
        request = {
            'description': '',
            'service_category': [],
            'service_types': [],
            'scope_of_work': '',
            'budget_range': None,
            'budget_not_clear': False,
            'documents': [],
            'questionnaire': [],
            'preferred_locations': [],
            'invited_professionals': [],
            'repeat_past_professionals': [],
            'is_ai_assisted': False,
        }
        request.update({k: v for k, v in copy.deepcopy(payload).items() if k not in PROTECTED_REQUEST_FIELDS})
        if not request.get('deadline'):
            days = self.setting('DEFAULT_SR_DEADLINE_DAYS', 30)
            request['deadline'] = (now.date() + timedelta(days=days)).isoformat()
        with self._lock:
            request.update({
                'id': new_id('sr'),
                'srn_number': self.srn_numbers.next(now.year),
                'status': ServiceRequestStatus.DRAFT.value,
                'created_by': payload.get('created_by') or actor,
                'created_at': now.isoformat(timespec='seconds'),
                'updated_at': now.isoformat(timespec='seconds'),
            })
            self.requests[request['id']] = request
        self._record('request_created', f"Service request {request['srn_number']} created",
                     reference=request['id'], actor=actor)
        return request

    def publish_service_request(self, request_id, actor=None):
        request = self.get_service_request(request_id)
        with self._lock:
            if request['status'] != ServiceRequestStatus.DRAFT:
                raise ConflictError(f"Only draft requests can be published (status: {request['status']})")

            errors = require_fields(request, ('title', 'scope_of_work'))
            if not request.get('service_types'):
                errors.append('at least one service type is required')
            if not request.get('deadline') or parse_date(request['deadline'], 'deadline') <= self.today():
                errors.append('deadline must be in the future')
            if errors:
                raise ValidationError('Service request is incomplete', details=errors)
            request['status'] = ServiceRequestStatus.OPEN.value
            request['published_at'] = request['updated_at'] = self.now_iso()
        self._record('request_published', f"Service request {request['srn_number']} published",
                     reference=request_id, actor=actor)
        return request

    def update_service_request(self, request_id, changes, actor=None):
        request = self.get_service_request(request_id)
        with self._lock:
            if request['status'] in LOCKED_REQUEST_STATUSES:
                raise ConflictError(f"Service request can no longer be edited (status: {request['status']})")
            updates = {k: v for k, v in changes.items() if k not in PROTECTED_REQUEST_FIELDS}
            self._validate_request(dict(request, **updates), creating=False)
            request.update(copy.deepcopy(updates))
            request['updated_at'] = self.now_iso()
        self._record('request_updated', f"Service request {request['srn_number']} updated",
                     reference=request_id, actor=actor)
        return request

    def delete_service_request(self, request_id, actor=None):
        with self._lock:
            request = self.requests.pop(request_id, None)
            if request is None:
                return False
            for bid_id in [b['id'] for b in self.bids.values() if b['service_request_id'] == request_id]:
                del self.bids[bid_id]
            for thread_id in [t['id'] for t in self.get_negotiations_for_service_request(request_id)]:
                del self.negotiations[thread_id]
            for query_id in [q['id'] for q in self.queries.values() if q['service_request_id'] == request_id]:
                del self.queries[query_id]
        self._record('request_deleted', f"Service request {request['srn_number']} deleted",
                     reference=request_id, actor=actor, level='WARNING')
        return True

    def cancel_service_request(self, request_id, reason=None, actor=None):
        request = self.get_service_request(request_id)
        with self._lock:
            if request['status'] in (ServiceRequestStatus.CANCELLED, ServiceRequestStatus.CLOSED,
                                     ServiceRequestStatus.COMPLETED, ServiceRequestStatus.WORK_ORDER_ISSUED):
                raise ConflictError(f"Service request cannot be cancelled (status: {request['status']})")
            request['status'] = ServiceRequestStatus.CANCELLED.value
            request['cancellation_reason'] = reason
            request['updated_at'] = self.now_iso()
            for bid in self._bids_for(request_id):
                if bid['status'] in ACTIVE_BID_STATUSES:
                    bid['status'] = BidStatus.EXPIRED.value
        self._record('request_cancelled', f"Service request {request['srn_number']} cancelled",
                     reference=request_id, actor=actor, level='WARNING')
        return request

    def mark_work_order_issued(self, request_id, work_order_id):
        request = self.get_service_request(request_id)
        with self._lock:
            if request['status'] != ServiceRequestStatus.BID_ACCEPTED:
                raise ConflictError(f"No accepted bid on this request (status: {request['status']})")
            request['status'] = ServiceRequestStatus.WORK_ORDER_ISSUED.value
            request['work_order_id'] = work_order_id
            request['updated_at'] = self.now_iso()
        return request

    def get_service_request_stats(self, user_id=None):
        requests = [r for r in self.requests.values() if not user_id or r.get('created_by') == user_id]
        ids = {r['id'] for r in requests}
        statuses = [r['status'] for r in requests]
        return {
            'total': len(requests),
            'open': sum(1 for s in statuses if s in ('open', 'bid_received')),
            'closed': sum(1 for s in statuses if s in ('closed', 'work_order_issued')),
            'draft': statuses.count('draft'),
            'bids_received': sum(1 for b in self.bids.values() if b['service_request_id'] in ids),
        }

    # ── Bids ────────────────────────────────────────────────────

    def _bids_for(self, request_id):
        return [b for b in self.bids.values() if b['service_request_id'] == request_id]

    def get_bid(self, bid_id):
        bid = self.bids.get(bid_id)
        if bid is None:
            raise NotFoundError('Bid', bid_id)
        return bid

    def _bid_financials(self, financials):
        if not isinstance(financials, dict):
            raise ValidationError('financials is required')
        structure = ensure_choice(financials.get('payment_structure', PaymentStructure.LUMP_SUM.value),
                                  PaymentStructure, 'financials.payment_structure')
        breakdown = self._fee_breakdown(financials)
        breakdown['payment_structure'] = structure.value
        breakdown['milestones'] = copy.deepcopy(financials.get('milestones') or [])
        if structure == PaymentStructure.MILESTONE_BASED and not breakdown['milestones']:
            raise ValidationError('milestone_based bids need at least one milestone')
        return breakdown

    def submit_bid(self, payload, actor=None):
        """Place a provider bid on an open request"""
        errors = require_fields(payload, ('service_request_id', 'provider_id', 'delivery_date'))
        if errors:
            raise ValidationError(errors)
        request = self.get_service_request(payload['service_request_id'])
        with self._lock:
            if request['status'] not in BIDDABLE_STATUSES:
                raise ConflictError(f"Service request is not accepting bids (status: {request['status']})")
            if request.get('deadline') and parse_date(request['deadline'], 'deadline') < self.today():
                raise ConflictError('Bidding deadline has passed')
            parse_date(payload['delivery_date'], 'delivery_date')
            financials = self._bid_financials(payload.get('financials'))

            now = self.now()
            provider_id = payload['provider_id']
            for other in self._bids_for(request['id']):
                if other['provider_id'] == provider_id and other['status'] in ACTIVE_BID_STATUSES:
                    raise ConflictError(f"Provider already has an active bid: {other['bid_number']}")

            bid = {
                'id': new_id('bid'),
                'bid_number': self.bid_numbers.next(now.year),
                'service_request_id': request['id'],
                'provider_id': provider_id,
                'provider_name': payload.get('provider_name', provider_id),
                'provider_profile': copy.deepcopy(payload.get('provider_profile') or {}),
                'financials': financials,
                'delivery_date': payload['delivery_date'],
                'additional_inputs': payload.get('additional_inputs', ''),
                'documents': copy.deepcopy(payload.get('documents') or []),
                'status': BidStatus.SUBMITTED.value,
                'is_invited': provider_id in request.get('invited_professionals', []),
                'submitted_at': now.isoformat(timespec='seconds'),
                'updated_at': now.isoformat(timespec='seconds'),
                'last_edit_date': now.isoformat(timespec='seconds'),
            }
            self.bids[bid['id']] = bid
            if request['status'] == ServiceRequestStatus.OPEN:
                request['status'] = ServiceRequestStatus.BID_RECEIVED.value
            request['updated_at'] = bid['submitted_at']

        self._record('bid_submitted', f"Bid {bid['bid_number']} submitted on {request['srn_number']}",
                     reference=request['id'], actor=actor or provider_id)
        return bid

    def get_bids_for_service_request(self, request_id, status=None, amount_min=None, amount_max=None,
                                     payment_structure=None, invited_only=False, sort_order='asc'):
        self.get_service_request(request_id)
        bids = self._bids_for(request_id)
        if status:
            bids = [b for b in bids if b['status'] in status]
        if amount_min is not None or amount_max is not None:
            bids = [b for b in bids
                    if in_amount_range(b['financials']['total_amount'], amount_min, amount_max)]
        if payment_structure:
            bids = [b for b in bids if b['financials'].get('payment_structure') in payment_structure]
        if invited_only:
            bids = [b for b in bids if b.get('is_invited')]
        return sorted(bids, key=lambda b: b['financials']['total_amount'], reverse=sort_order == 'desc')

    def update_bid(self, bid_id, changes, actor=None):
        bid = self.get_bid(bid_id)
        with self._lock:
            if bid['status'] not in ACTIVE_BID_STATUSES:
                raise ConflictError(f"Bid can no longer be edited (status: {bid['status']})")
            financials = None
            if 'financials' in changes:
                merged = dict(bid['financials'], **(changes['financials'] or {}))
                financials = self._bid_financials(merged)
            if 'delivery_date' in changes:
                parse_date(changes['delivery_date'], 'delivery_date')
            for field in ('delivery_date', 'additional_inputs', 'documents', 'provider_profile'):
                if field in changes:
                    bid[field] = copy.deepcopy(changes[field])
            if financials is not None:
                bid['financials'] = financials
            bid['updated_at'] = bid['last_edit_date'] = self.now_iso()
        self._record('bid_updated', f"Bid {bid['bid_number']} updated",
                     reference=bid['service_request_id'], actor=actor)
        return bid

    def withdraw_bid(self, bid_id, actor=None):
        bid = self.get_bid(bid_id)
        with self._lock:
            if bid['status'] not in ACTIVE_BID_STATUSES:
                raise ConflictError(f"Bid cannot be withdrawn (status: {bid['status']})")
            bid['status'] = BidStatus.WITHDRAWN.value
            bid['updated_at'] = self.now_iso()
        self._record('bid_withdrawn', f"Bid {bid['bid_number']} withdrawn",
                     reference=bid['service_request_id'], actor=actor)
        return bid

    def accept_bid(self, bid_id, actor=None):
        """Accept one bid; every other active bid on the request is rejected"""
        bid = self.get_bid(bid_id)
        with self._lock:
            if bid['status'] not in ACTIVE_BID_STATUSES:
                raise ConflictError(f"Bid cannot be accepted (status: {bid['status']})")
            request = self.get_service_request(bid['service_request_id'])
            if request['status'] not in BIDDABLE_STATUSES:
                raise ConflictError(f"Service request is not open for award (status: {request['status']})")

            now = self.now_iso()
            bid['status'] = BidStatus.ACCEPTED.value
            bid['accepted_at'] = bid['updated_at'] = now
            for other in self._bids_for(request['id']):
                if other['id'] != bid_id and other['status'] in ACTIVE_BID_STATUSES:
                    other['status'] = BidStatus.REJECTED.value
                    other['rejection_reason'] = 'Another bid was accepted'
                    other['updated_at'] = now
            request['status'] = ServiceRequestStatus.BID_ACCEPTED.value
            request['accepted_bid_id'] = bid_id
            request['updated_at'] = now
        self._record('bid_accepted', f"Bid {bid['bid_number']} accepted for {request['srn_number']}",
                     reference=request['id'], actor=actor)
        return bid

    def reject_bid(self, bid_id, reason=None, actor=None):
        bid = self.get_bid(bid_id)
        with self._lock:
            if bid['status'] not in ACTIVE_BID_STATUSES:
                raise ConflictError(f"Bid cannot be rejected (status: {bid['status']})")
            bid['status'] = BidStatus.REJECTED.value
            bid['rejection_reason'] = reason
            bid['updated_at'] = self.now_iso()
        self._record('bid_rejected', f"Bid {bid['bid_number']} rejected",
                     reference=bid['service_request_id'], actor=actor)
        return bid

    # ── Negotiation ─────────────────────────────────────────────

    def get_negotiation(self, thread_id):
        thread = self.negotiations.get(thread_id)
        if thread is None:
            raise NotFoundError('Negotiation', thread_id)
        return thread

    def get_negotiations_for_service_request(self, request_id):
        return [t for t in self.negotiations.values() if t['service_request_id'] == request_id]

    def initiate_negotiation(self, request_id, bid_id, reasons, initiated_by=None):
        """Open a negotiation thread on a bid for one or more reasons"""
        request = self.get_service_request(request_id)
        bid = self.get_bid(bid_id)
        if bid['service_request_id'] != request_id:
            raise ValidationError('Bid does not belong to this service request')
        with self._lock:
            if bid['status'] not in ACTIVE_BID_STATUSES:
                raise ConflictError(f"Bid cannot be negotiated (status: {bid['status']})")
            if not reasons:
                raise ValidationError('At least one negotiation reason is required')
            reasons = ensure_choices(reasons, NegotiationReason, 'reasons')

            now = self.now_iso()
            thread = {
                'id': new_id('neg'),
                'service_request_id': request_id,
                'bid_id': bid_id,
                'reasons': [r.value for r in reasons],
                'status': 'open',
                'initiated_by': initiated_by,
                'messages': [],
                'created_at': now,
                'updated_at': now,
            }
            self.negotiations[thread['id']] = thread
            bid['status'] = BidStatus.UNDER_NEGOTIATION.value
            request['status'] = ServiceRequestStatus.UNDER_NEGOTIATION.value
            bid['updated_at'] = request['updated_at'] = now
        self._record('negotiation_started', f"Negotiation opened on bid {bid['bid_number']} "
                     f"({', '.join(thread['reasons'])})", reference=request_id, actor=initiated_by)
        return thread

    @staticmethod
    def _validate_negotiation_input(reason, data):
        errors = [f'{field} is required for {reason.value}'
                  for field in NEGOTIATION_REQUIREMENTS[reason] if not data.get(field)]
        if reason == NegotiationReason.ADJUST_FEE and data.get('suggested_fee') is not None:
            fee = data['suggested_fee']
            if not isinstance(fee, (int, float)) or isinstance(fee, bool) or fee <= 0:
                errors.append('suggested_fee must be a positive number')
        if reason == NegotiationReason.REVISED_TIMELINE and data.get('new_completion_date'):
            try:
                parse_date(data['new_completion_date'], 'new_completion_date')
            except ValidationError as e:
                errors.append(e.message)
        if reason == NegotiationReason.CHANGE_PAYMENT_STRUCTURE and data.get('preferred_model'):
            try:
                ensure_choice(data['preferred_model'], PaymentStructure, 'preferred_model')
            except ValidationError as e:
                errors.append(e.message)
        return errors

    def submit_negotiation_input(self, thread_id, payload, sender=None):
        thread = self.get_negotiation(thread_id)
        with self._lock:
            if thread['status'] != 'open':
                raise ConflictError('Negotiation is closed')
            reason = ensure_choice(payload.get('reason'), NegotiationReason, 'reason')
            if reason.value not in thread['reasons']:
                raise ValidationError(f'{reason.value} is not part of this negotiation')
            data = payload.get('data') or {}
            errors = self._validate_negotiation_input(reason, data)
            if errors:
                raise ValidationError(errors)

            message = {
                'id': new_id('msg'),
                'reason': reason.value,
                'data': copy.deepcopy(data),
                'message': payload.get('message', ''),
                'sender': sender or payload.get('sender'),
                'sent_at': self.now_iso(),
            }
            thread['messages'].append(message)
            thread['updated_at'] = message['sent_at']
        return message

    def close_negotiation(self, thread_id, outcome, actor=None):
        """Close a thread; an agreed outcome returns the bid to review"""
        if outcome not in ('agreed', 'declined'):
            raise ValidationError('outcome must be one of: agreed, declined')
        thread = self.get_negotiation(thread_id)
        with self._lock:
            if thread['status'] != 'open':
                raise ConflictError('Negotiation is already closed')
            bid = self.get_bid(thread['bid_id'])
            request = self.get_service_request(thread['service_request_id'])

            now = self.now_iso()
            thread['status'] = 'closed'
            thread['outcome'] = outcome
            thread['closed_at'] = thread['updated_at'] = now
            if bid['status'] == BidStatus.UNDER_NEGOTIATION:
                bid['status'] = (BidStatus.UNDER_REVIEW if outcome == 'agreed' else BidStatus.REJECTED).value
                bid['updated_at'] = now
            still_open = any(t['status'] == 'open'
                             for t in self.get_negotiations_for_service_request(request['id']))
            if request['status'] == ServiceRequestStatus.UNDER_NEGOTIATION and not still_open:
                request['status'] = ServiceRequestStatus.BID_RECEIVED.value
                request['updated_at'] = now
        self._record('negotiation_closed', f"Negotiation on bid {bid['bid_number']} closed: {outcome}",
                     reference=request['id'], actor=actor)
        return thread

    # ── Queries ─────────────────────────────────────────────────

    def post_query(self, request_id, sender, message, is_public=True, recipients=None):
        self.get_service_request(request_id)
        if not sender:
            raise ValidationError('sender is required')
        if not message or not str(message).strip():
            raise ValidationError('message is required')
        if not is_public and not recipients:
            raise ValidationError('private queries need at least one recipient')
        query = {
            'id': new_id('qry'),
            'service_request_id': request_id,
            'sender': sender,
            'message': message,
            'is_public': bool(is_public),
            'recipients': list(recipients or []),
            'responses': [],
            'created_at': self.now_iso(),
        }
        with self._lock:
            self.queries[query['id']] = query
        return query

    def respond_to_query(self, query_id, responder, message):
        query = self.queries.get(query_id)
        if query is None:
            raise NotFoundError('Query', query_id)
        if not message or not str(message).strip():
            raise ValidationError('message is required')
        response = {'responder': responder, 'message': message, 'responded_at': self.now_iso()}
        with self._lock:
            query['responses'].append(response)
        return query

    def get_queries_for_service_request(self, request_id, viewer_id=None):
        """Public queries plus the private ones the viewer sent or received"""
        self.get_service_request(request_id)
        visible = []
        for query in self.queries.values():
            if query['service_request_id'] != request_id:
                continue
            if (query['is_public'] or viewer_id is None or query['sender'] == viewer_id
                    or viewer_id in query['recipients']):
                visible.append(query)
        return sorted(visible, key=lambda q: q['created_at'])

    # ── Provider opportunities ──────────────────────────────────

    def _provider_bid(self, request_id, provider_id):
        bids = [b for b in self._bids_for(request_id) if b['provider_id'] == provider_id]
        active = [b for b in bids if b['status'] not in (BidStatus.WITHDRAWN,)]
        return active[-1] if active else None

    def get_opportunities(self, provider_id, service_types=None, location=None, search=None,
                          page=1, limit=10):
        """Requests a provider can still bid on"""
        skipped = self.not_interested.get(provider_id, set())
        results = []
        for request in self.requests.values():
            if request['status'] not in BIDDABLE_STATUSES or request['id'] in skipped:
                continue
            if service_types and not set(service_types) & set(request.get('service_types', [])):
                continue
            if location and location.lower() not in [l.lower() for l in request.get('preferred_locations', [])]:
                continue
            if search and search.lower() not in f"{request.get('title', '')} {request.get('description', '')}".lower():
                continue
            own_bid = self._provider_bid(request['id'], provider_id)
            opportunity = dict(request)
            opportunity['my_bid_id'] = own_bid['id'] if own_bid else None
            opportunity['my_bid_status'] = own_bid['status'] if own_bid else None
            opportunity['is_invited'] = provider_id in request.get('invited_professionals', [])
            opportunity['allocation'] = request.get('allocations', {}).get(provider_id)
            results.append(opportunity)
        results = sort_records(results, 'deadline')
        return paginate(results, page, limit)

    def get_opportunity_stats(self, provider_id):
        skipped = self.not_interested.get(provider_id, set())
        stats = {'total': 0, 'open': 0, 'bid_submitted': 0, 'won': 0, 'missed': 0}
        for request in self.requests.values():
            own_bid = self._provider_bid(request['id'], provider_id)
            if request['status'] in BIDDABLE_STATUSES and request['id'] not in skipped:
                stats['total'] += 1
                if own_bid is None:
                    stats['open'] += 1
            if own_bid is None:
                continue
            if own_bid['status'] in ACTIVE_BID_STATUSES:
                stats['bid_submitted'] += 1
            elif own_bid['status'] == BidStatus.ACCEPTED:
                stats['won'] += 1
            elif own_bid['status'] in (BidStatus.REJECTED, BidStatus.EXPIRED) \
                    and request.get('accepted_bid_id') not in (None, own_bid['id']):
                stats['missed'] += 1
        return stats

    def mark_opportunity_not_interested(self, provider_id, request_id, reason=None):
        self.get_service_request(request_id)
        with self._lock:
            self.not_interested.setdefault(provider_id, set()).add(request_id)
        self._record('opportunity_skipped', f'Provider {provider_id} not interested'
                     + (f': {reason}' if reason else ''), reference=request_id, actor=provider_id)
        return True

    def allocate_opportunity_to_team_member(self, request_id, provider_id, member_id, allocated_by=None):
        """Hand an opportunity to a member of the provider's team"""
        if not member_id:
            raise ValidationError('member_id is required')
        request = self.get_service_request(request_id)
        allocation = {
            'member_id': member_id,
            'allocated_by': allocated_by,
            'allocated_at': self.now_iso(),
        }
        with self._lock:
            request.setdefault('allocations', {})[provider_id] = allocation
        self._record('opportunity_allocated', f'Opportunity allocated to {member_id}',
                     reference=request_id, actor=allocated_by)
        return allocation

    def bulk_allocate_opportunities(self, request_ids, provider_id, member_id, allocated_by=None):
        if not request_ids:
            raise ValidationError('request_ids must not be empty')
        missing = [rid for rid in request_ids if rid not in self.requests]
        if missing:
            raise NotFoundError('Service request', ', '.join(missing))
        return {rid: self.allocate_opportunity_to_team_member(rid, provider_id, member_id, allocated_by)
                for rid in request_ids}

    # ── Assistant and exports ───────────────────────────────────

    def get_ai_suggestions(self, description):
        """Keyword-matched professionals, services and checklist for a brief"""
        if not description or not description.strip():
            raise ValidationError('description is required')
        text = description.lower()
        professionals, services, documents, matched = [], [], [], []
        for keywords, rule_professionals, rule_services, rule_documents in SUGGESTION_RULES:
            hits = [k for k in keywords if k in text]
            if not hits:
                continue
            matched.extend(hits)
            for professional in rule_professionals:
                if professional.value not in professionals:
                    professionals.append(professional.value)
            for service in rule_services:
                if service.value not in services:
                    services.append(service.value)
            for doc in rule_documents:
                if doc not in documents:
                    documents.append(doc)

        if not services:
            services.append(ServiceType.OTHERS.value)
        summary = description.strip().split('.')[0]
        scope = [f'Understand the requirement: {summary}',
                 'Review documents shared by the client',
                 'Deliver the report or filing with supporting working papers']
        return {
            'professional_types': professionals,
            'service_types': services,
            'scope_of_work': '\n'.join(f'{i}. {line}' for i, line in enumerate(scope, 1)),
            'documents_checklist': documents,
            'matched_keywords': matched,
        }

    @staticmethod
    def _to_csv(columns, rows):
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction='ignore')
        writer.writeheader()
        writer.writerows(rows)
        return buffer.getvalue()

    def export_service_requests(self, **filters):
        filters.pop('page', None)
        filters.pop('limit', None)
        result = self.get_service_requests(page=1, limit=max(len(self.requests), 1), **filters)
        rows = []
        for request in result['data']:
            budget = request.get('budget_range') or {}
            rows.append({
                'srn_number': request.get('srn_number'),
                'title': request.get('title'),
                'status': request.get('status'),
                'service_types': ';'.join(request.get('service_types', [])),
                'budget_min': budget.get('min'),
                'budget_max': budget.get('max'),
                'deadline': request.get('deadline'),
                'created_by': request.get('created_by'),
                'created_at': request.get('created_at'),
                'bid_count': len(self._bids_for(request['id'])),
            })
        logger.info('Exported %d service requests', len(rows))
        return self._to_csv(REQUEST_EXPORT_COLUMNS, rows)

    def export_bids(self, request_id):
        rows = []
        for bid in self.get_bids_for_service_request(request_id):
            row = dict(bid['financials'])
            row.update({k: bid.get(k) for k in ('bid_number', 'provider_name', 'status',
                                                 'delivery_date', 'submitted_at')})
            rows.append(row)
        return self._to_csv(BID_EXPORT_COLUMNS, rows)
