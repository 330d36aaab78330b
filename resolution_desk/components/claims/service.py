"""
Claims Verification Business Logic

A claim moves through allocation, verification and admission:

    open / allocation_pending -> verification_pending -> admission_pending -> accepted
                                          |                      |
                                          +------> rejected <----+
"""
import copy
from collections import Counter

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import new_id
from resolution_desk.core.money import format_inr, percentage, simple_interest
from resolution_desk.core.pagination import matches_search, paginate
from resolution_desk.core.validators import non_negative_number, parse_date, require_fields
from .fixtures import CHECKLIST_FLAGS, DEMO_CLAIMS, blank_checklist

CLAIM_STATUSES = ('open', 'allocation_pending', 'verification_pending', 'admission_pending',
                  'accepted', 'rejected')
CLAIM_SOURCES = ('claimant_submitted', 'team_uploaded')
CLAIM_TABS = ('all', 'verification', 'admission', 'allocation', 'team_uploaded')
SORT_OPTIONS = ('latest', 'oldest', 'amount_high', 'amount_low')

REQUIRED_DECLARATIONS = (
    'accuracy_declaration',
    'legal_consequences_acknowledgment',
    'duplicate_claim_declaration',
    'communication_consent',
)

EDITABLE_STATUSES = ('open', 'allocation_pending', 'verification_pending')
EDITABLE_FIELDS = ('claimant_name', 'claimant_category', 'entity_name', 'principal_amount',
                   'interest_amount', 'personal_info', 'bank_details', 'documents')
VERIFICATION_FIELDS = ('security_type', 'relationship_status', 'verifier_amount', 'verifier_remarks')

# Tab -> (status it pins, source it pins)
_TAB_FILTERS = {
    'verification': ('verification_pending', None),
    'admission': ('admission_pending', None),
    'allocation': ('allocation_pending', None),
    'team_uploaded': (None, 'team_uploaded'),
}


@register_component('claims')
class ClaimService(DeskService):
    """Service for creditor claims and their verification"""

    module = 'claims'

    def __init__(self, config=None, audit=None, clock=None):
        super().__init__(config, audit, clock)
        self.claims = {}

    def seed(self):
        for claim in copy.deepcopy(DEMO_CLAIMS):
            self.claims[claim['id']] = claim

    def get_claim(self, claim_id):
        claim = self.claims.get(claim_id)
        if claim is None:
            raise NotFoundError('Claim', claim_id)
        return claim

    def list_claims(self, tab='all', search=None, status=None, source=None, sort_by='latest',
                    page=1, limit=10):
        """Claims for a list tab

        The verification, admission and allocation tabs pin the status and
        honour only the source filter; the team-uploaded tab pins the source
        and honours only the status filter.
        """
        if tab not in CLAIM_TABS:
            raise ValidationError(f"tab must be one of: {', '.join(CLAIM_TABS)}")
        if sort_by not in SORT_OPTIONS:
            raise ValidationError(f"sort_by must be one of: {', '.join(SORT_OPTIONS)}")

        pinned_status, pinned_source = _TAB_FILTERS.get(tab, (None, None))
        if pinned_status:
            status = pinned_status
        if pinned_source:
            source = pinned_source

        claims = [c for c in self.claims.values()
                  if matches_search(c, search, ('claimant_name', 'claimant_category'))]
        if status and status != 'all':
            claims = [c for c in claims if c['status'] == status]
        if source and source != 'all':
            claims = [c for c in claims if c['source'] == source]

        if sort_by in ('latest', 'oldest'):
            claims.sort(key=lambda c: c['submission_date'], reverse=sort_by == 'latest')
        else:
            claims.sort(key=lambda c: c['claimed_amount'], reverse=sort_by == 'amount_high')
        return paginate(claims, page, limit)

    # ── Intake ──────────────────────────────────────────────────

    def _new_claim(self, payload, status, source, principal, interest):
        claim = {
            'id': new_id('claim'),
            'claimant_name': payload['claimant_name'],
            'claimant_category': payload['claimant_category'],
            'claimant_type': payload.get('claimant_type', 'self'),
            'principal_amount': principal,
            'interest_amount': interest,
            'claimed_amount': principal + interest,
            'status': status,
            'source': source,
            'submission_date': self.today().isoformat(),
            'entity_name': payload.get('entity_name'),
            'personal_info': copy.deepcopy(payload.get('personal_info') or {}),
            'bank_details': copy.deepcopy(payload.get('bank_details') or {}),
            'documents': copy.deepcopy(payload.get('documents') or []),
            'verification': {
                'security_type': payload.get('security_type'),
                'relationship_status': None,
                'platform_amount': principal + interest,
                'platform_remarks': '',
                'verifier_amount': 0,
                'verifier_remarks': '',
                'verification_status': 'pending',
                'queries': [],
                'checklist': blank_checklist(),
            },
        }
        with self._lock:
            self.claims[claim['id']] = claim
        return claim

    def submit_claim(self, payload):
        """Claim filed by the claimant through an invitation"""
        errors = require_fields(payload, ('claimant_name', 'claimant_category', 'principal_amount'))
        declarations = payload.get('declarations') or {}
        missing = [d for d in REQUIRED_DECLARATIONS if not declarations.get(d)]
        if missing:
            errors.append(f"declarations not accepted: {', '.join(missing)}")
        if errors:
            raise ValidationError(errors)

        principal = non_negative_number(payload['principal_amount'], 'principal_amount')
        if principal == 0:
            raise ValidationError('principal_amount must be greater than zero')

        interest = 0
        if payload.get('interest_claimed'):
            if not payload.get('interest_from_date'):
                raise ValidationError('interest_from_date is required when interest is claimed')
            from_date = parse_date(payload['interest_from_date'], 'interest_from_date')
            if from_date > self.today():
                raise ValidationError('interest_from_date must not be in the future')
            interest = simple_interest(principal, self.setting('CLAIM_INTEREST_RATE', 0.12),
                                       from_date, self.today())

        claim = self._new_claim(payload, 'open', 'claimant_submitted', principal, interest)
        if payload.get('interest_claimed'):
            claim['interest_from_date'] = payload['interest_from_date']
        self._record('claim_submitted',
                     f"Claim by {claim['claimant_name']} for {format_inr(claim['claimed_amount'])}",
                     reference=claim['id'], actor=claim['claimant_name'])
        return claim

    def upload_claim(self, payload, uploaded_by):
        """Claim keyed in by the resolution team on a creditor's behalf"""
        errors = require_fields(payload, ('claimant_name', 'claimant_category', 'claimed_amount'))
        if not uploaded_by:
            errors.append('uploaded_by is required')
        if errors:
            raise ValidationError(errors)
        claimed = non_negative_number(payload['claimed_amount'], 'claimed_amount')
        interest = non_negative_number(payload.get('interest_amount', 0), 'interest_amount')
        if interest > claimed:
            raise ValidationError('interest_amount must not exceed claimed_amount')

        claim = self._new_claim(payload, 'allocation_pending', 'team_uploaded', claimed - interest, interest)
        claim['uploaded_by'] = uploaded_by
        self._record('claim_uploaded', f"Claim for {claim['claimant_name']} uploaded",
                     reference=claim['id'], actor=uploaded_by)
        return claim

    def update_claim(self, claim_id, changes, actor=None):
        claim = self.get_claim(claim_id)
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")
        for field in ('principal_amount', 'interest_amount'):
            if field in changes:
                non_negative_number(changes[field], field)

        with self._lock:
            if claim['status'] not in EDITABLE_STATUSES:
                raise ConflictError(f"Claim can no longer be edited (status: {claim['status']})")
            claim.update(copy.deepcopy(changes))
            claim['claimed_amount'] = claim['principal_amount'] + claim['interest_amount']
        self._record('claim_updated', f"Claim updated ({', '.join(sorted(changes))})",
                     reference=claim_id, actor=actor)
        return claim

    def delete_claim(self, claim_id, actor=None):
        claim = self.get_claim(claim_id)
        with self._lock:
            if claim['status'] == 'accepted':
                raise ConflictError('Admitted claims cannot be deleted')
            del self.claims[claim_id]
        self._record('claim_deleted', f"Claim by {claim['claimant_name']} deleted",
                     reference=claim_id, actor=actor, level='WARNING')
        return True

    def allocate_claim(self, claim_id, assignee, actor=None):
        if not assignee:
            raise ValidationError('assignee is required')
        claim = self.get_claim(claim_id)
        with self._lock:
            if claim['status'] not in ('open', 'allocation_pending'):
                raise ConflictError(f"Claim cannot be allocated (status: {claim['status']})")
            claim['assigned_to'] = assignee
            claim['status'] = 'verification_pending'
        self._record('claim_allocated', f'Claim allocated to {assignee}', reference=claim_id, actor=actor)
        return claim

    # ── Verification ────────────────────────────────────────────

    def _verifiable(self, claim_id):
        """Fetch a claim under verification; call while holding the lock"""
        claim = self.get_claim(claim_id)
        if claim['status'] not in ('verification_pending', 'admission_pending'):
            raise ConflictError(f"Claim is not under verification (status: {claim['status']})")
        return claim

    @staticmethod
    def _check_verifier_amount(claim, amount):
        if not isinstance(amount, (int, float)) or isinstance(amount, bool) or amount <= 0:
            raise ValidationError('verifier_amount must be greater than zero')
        if amount > claim['claimed_amount']:
            raise ValidationError('verifier_amount must not exceed the claimed amount')

    def save_verification(self, claim_id, changes, actor=None):
        """Save verifier edits; edits after completion mark the claim as modified"""
        claim = self.get_claim(claim_id)
        verification = claim['verification']

        unknown = sorted(set(changes) - set(VERIFICATION_FIELDS) - {'checklist'})
        if unknown:
            raise ValidationError(f"Unknown verification fields: {', '.join(unknown)}")
        checklist = changes.get('checklist') or {}
        bad_flags = sorted(set(checklist) - set(CHECKLIST_FLAGS))
        if bad_flags:
            raise ValidationError(f"Unknown checklist items: {', '.join(bad_flags)}")
        if any(not isinstance(v, bool) for v in checklist.values()):
            raise ValidationError('checklist values must be true or false')
        if changes.get('verifier_amount'):
            self._check_verifier_amount(claim, changes['verifier_amount'])

        with self._lock:
            self._verifiable(claim_id)
            for field in VERIFICATION_FIELDS:
                if field in changes:
                    verification[field] = changes[field]
            verification['checklist'].update(checklist)
            if claim['status'] == 'admission_pending':
                verification['verification_status'] = 'modification_done'
            elif verification['verification_status'] == 'pending':
                verification['verification_status'] = 'ongoing'
        self._record('verification_saved', 'Verification details saved', reference=claim_id, actor=actor)
        return claim

    def add_query(self, claim_id, question, actor=None):
        if not question or not str(question).strip():
            raise ValidationError('question is required')
        with self._lock:
            queries = self._verifiable(claim_id)['verification']['queries']
            query = {
                'id': f'q{len(queries) + 1}',
                'question': question.strip(),
                'response': '',
                'raised_by': actor,
                'timestamp': self.now_iso(),
            }
            queries.append(query)
        self._record('query_raised', 'Query sent to claimant', reference=claim_id, actor=actor)
        return query

    def respond_to_query(self, claim_id, query_id, response, actor=None):
        if not response or not str(response).strip():
            raise ValidationError('response is required')
        claim = self.get_claim(claim_id)
        for query in claim['verification']['queries']:
            if query['id'] == query_id:
                with self._lock:
                    query['response'] = response
                    query['responded_at'] = self.now_iso()
                self._record('query_answered', f'Query {query_id} answered', reference=claim_id, actor=actor)
                return query
        raise NotFoundError('Query', query_id)

    def accept_platform_figure(self, claim_id, verifier):
        """Adopt the platform-computed amount and complete verification"""
        claim = self.get_claim(claim_id)
        with self._lock:
            if claim['status'] != 'verification_pending':
                raise ConflictError(f"Claim is not awaiting verification (status: {claim['status']})")
            self._check_verifier_amount(claim, claim['verification']['platform_amount'])
            claim['verification']['verifier_amount'] = claim['verification']['platform_amount']
            return self.complete_verification(claim_id, verifier)

    def complete_verification(self, claim_id, verifier):
        claim = self.get_claim(claim_id)
        with self._lock:
            if claim['status'] != 'verification_pending':
                raise ConflictError(f"Claim is not awaiting verification (status: {claim['status']})")
            if not claim['verification'].get('verifier_amount'):
                raise ValidationError('Please specify the admissible amount before completing verification')
            self._check_verifier_amount(claim, claim['verification']['verifier_amount'])
            claim['verification']['verification_status'] = 'completed'
            claim['verified_by'] = verifier
            claim['verified_at'] = self.now_iso()
            claim['status'] = 'admission_pending'
        self._record('verification_completed',
                     f"Verified at {format_inr(claim['verification']['verifier_amount'])} by {verifier}",
                     reference=claim_id, actor=verifier)
        return claim

    def admit_claim(self, claim_id, admitted_by, amount=None):
        claim = self.get_claim(claim_id)
        with self._lock:
            if claim['status'] != 'admission_pending':
                raise ConflictError(f"Claim is not awaiting admission (status: {claim['status']})")
            verified = claim['verification']['verifier_amount']
            if amount is None:
                amount = verified
            if not isinstance(amount, (int, float)) or isinstance(amount, bool) or amount <= 0:
                raise ValidationError('admitted amount must be greater than zero')
            if amount > verified:
                raise ValidationError('admitted amount must not exceed the verified amount')
            claim['admitted_amount'] = amount
            claim['admitted_by'] = admitted_by
            claim['admitted_at'] = self.now_iso()
            claim['status'] = 'accepted'
        self._record('claim_admitted', f'Claim admitted at {format_inr(amount)}', reference=claim_id,
                     actor=admitted_by)
        return claim

    def reject_claim(self, claim_id, reason, actor=None):
        if not reason or not str(reason).strip():
            raise ValidationError('reason is required')
        with self._lock:
            claim = self._verifiable(claim_id)
            claim['status'] = 'rejected'
            claim['rejection_reason'] = reason
            claim['rejected_by'] = actor
        self._record('claim_rejected', f'Claim rejected: {reason}', reference=claim_id,
                     actor=actor, level='WARNING')
        return claim

    # ── Reporting ───────────────────────────────────────────────

    def get_claim_stats(self):
        claims = list(self.claims.values())
        by_status = Counter(c['status'] for c in claims)
        total_claimed = sum(c['claimed_amount'] for c in claims)
        total_admitted = sum(c.get('admitted_amount') or 0 for c in claims if c['status'] == 'accepted')
        return {
            'total': len(claims),
            'by_status': {status: by_status.get(status, 0) for status in CLAIM_STATUSES},
            'total_claimed': total_claimed,
            'total_admitted': total_admitted,
            'admission_ratio': percentage(total_admitted, total_claimed),
        }

    def get_claim_audit_log(self, claim_id, limit=100):
        self.get_claim(claim_id)
        return self.audit.get_entries(module=self.module, reference=claim_id, limit=limit)
