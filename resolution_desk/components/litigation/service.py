"""
Litigation Tracking Business Logic
"""
import copy

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import SequenceGenerator, new_id
from resolution_desk.core.pagination import matches_search
from resolution_desk.core.validators import non_negative_number, parse_date, require_fields
from .fixtures import DEMO_CASES

CASE_TYPES = ('pre-filing', 'active', 'closed')
CASE_STATUSES = ('draft', 'pending', 'critical', 'won', 'lost', 'awaiting-docs', 'upcoming')
PRIORITIES = ('low', 'medium', 'high', 'critical')
CASE_TABS = ('upcoming', 'in-progress', 'completed', 'drafts', 'all')
SORT_OPTIONS = ('latest', 'oldest', 'alphabetical')

SEARCH_FIELDS = ('title', 'case_number', 'plaintiff', 'defendant')
IMMUTABLE_FIELDS = ('id', 'type', 'created_date', 'hearings', 'documents')
# Fields every case keeps once created
CASE_REQUIRED_FIELDS = ('case_number', 'title', 'court', 'plaintiff', 'defendant')


def _in_tab(case, tab):
    status = case['status']
    if tab == 'upcoming':
        return case['type'] != 'closed' and (status in ('pending', 'upcoming') or bool(case.get('next_hearing')))
    if tab == 'in-progress':
        return status in ('critical', 'awaiting-docs')
    if tab == 'completed':
        return status in ('won', 'lost')
    if tab == 'drafts':
        return status == 'draft'
    return True


@register_component('litigation')
class LitigationService(DeskService):
    """Service for pre-filing drafts, active cases and their hearings"""

    module = 'litigation'

    def __init__(self, config=None, audit=None, clock=None):
        super().__init__(config, audit, clock)
        self.cases = {}
        self.pre_filing_numbers = SequenceGenerator('PRE-', separator='-')

    def seed(self):
        for case in copy.deepcopy(DEMO_CASES):
            self.cases[case['id']] = case
            self.pre_filing_numbers.observe(case['case_number'])

    def _days_left(self, case):
        """Days to the next hearing, or to the filing deadline for drafts"""
        if case['type'] == 'closed':
            return None
        target = case.get('next_hearing')
        if case['type'] == 'pre-filing':
            target = case.get('filing_deadline')
        if not target:
            return None
        return (parse_date(target, 'date') - self.today()).days

    def _view(self, case):
        view = dict(case)
        view['days_left'] = self._days_left(case)
        return view

    def _get(self, case_id):
        case = self.cases.get(case_id)
        if case is None:
            raise NotFoundError('Case', case_id)
        return case

    def get_case(self, case_id):
        return self._view(self._get(case_id))

    def list_cases(self, tab='all', case_type=None, status=None, search=None, sort_by='latest',
                   entity=None):
        if tab not in CASE_TABS:
            raise ValidationError(f"tab must be one of: {', '.join(CASE_TABS)}")
        if sort_by not in SORT_OPTIONS:
            raise ValidationError(f"sort_by must be one of: {', '.join(SORT_OPTIONS)}")

        cases = [c for c in self.cases.values() if _in_tab(c, tab)]
        if case_type and case_type != 'all':
            cases = [c for c in cases if c['type'] == case_type]
        if status and status != 'all':
            cases = [c for c in cases if c['status'] == status]
        if entity:
            cases = [c for c in cases if entity in (c.get('entity_name'), c['plaintiff'], c['defendant'])]
        if search and search.strip():
            cases = [c for c in cases if matches_search(c, search.strip(), SEARCH_FIELDS)]

        if sort_by == 'alphabetical':
            cases.sort(key=lambda c: (c.get('title') or '').lower())
        else:
            cases.sort(key=lambda c: c['created_date'], reverse=sort_by == 'latest')
        return [self._view(c) for c in cases]

    # ── Case records ────────────────────────────────────────────

    def _validate(self, payload, required):
        errors = require_fields(payload, required)
        if payload.get('amount') is not None:
            try:
                non_negative_number(payload['amount'], 'amount')
            except ValidationError as e:
                errors.append(e.message)
        if payload.get('priority') and payload['priority'] not in PRIORITIES:
            errors.append(f"priority must be one of: {', '.join(PRIORITIES)}")
        if payload.get('status') and payload['status'] not in CASE_STATUSES:
            errors.append(f"status must be one of: {', '.join(CASE_STATUSES)}")
        for field in ('filed_date', 'next_hearing', 'filing_deadline'):
            if payload.get(field):
                try:
                    parse_date(payload[field], field)
                except ValidationError as e:
                    errors.append(e.message)
        if errors:
            raise ValidationError(errors)

    def _ensure_unique_number(self, case_number, exclude_id=None):
        for case in self.cases.values():
            if case['case_number'] == case_number and case['id'] != exclude_id:
                raise ConflictError(f'Case number already in use: {case_number}')

    def _new_case(self, payload, **fields):
        case = {
            'lawyer': '',
            'amount': 0,
            'priority': 'medium',
            'participants': 0,
            'hearings': [],
            'documents': [],
        }
        case.update({k: v for k, v in copy.deepcopy(payload).items() if k not in IMMUTABLE_FIELDS})
        case.update(fields)
        case['id'] = new_id('case')
        case['created_date'] = self.today().isoformat()
        case.setdefault('entity_name', case.get('plaintiff'))
        return case

    def create_pre_filing(self, payload, actor=None):
        """Draft a case that has not been filed yet"""
        self._validate(payload, ('title', 'court', 'plaintiff', 'defendant'))
        with self._lock:
            case = self._new_case(payload, type='pre-filing', status='draft',
                                  case_number=self.pre_filing_numbers.next(self.today().year))
            self.cases[case['id']] = case
        self._record('pre_filing_created', f"Pre-filing {case['case_number']} drafted",
                     reference=case['id'], actor=actor)
        return self._view(case)

    def create_active_case(self, payload, actor=None):
        self._validate(payload, ('case_number', 'title', 'court', 'plaintiff', 'defendant', 'filed_date'))
        if payload.get('next_hearing') and (parse_date(payload['next_hearing'], 'next_hearing')
                                            < parse_date(payload['filed_date'], 'filed_date')):
            raise ValidationError('next_hearing must not be before filed_date')
        with self._lock:
            self._ensure_unique_number(payload['case_number'])
            case = self._new_case(payload, type='active', status=payload.get('status', 'pending'))
            if case.get('next_hearing'):
                case['hearings'].append({'id': new_id('hr'), 'date': case['next_hearing'],
                                         'purpose': 'First hearing', 'status': 'scheduled', 'outcome': None})
            self.cases[case['id']] = case
        self._record('case_created', f"Case {case['case_number']} recorded", reference=case['id'], actor=actor)
        return self._view(case)

    def update_case(self, case_id, changes, actor=None):
        case = self._get(case_id)
        updates = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
        self._validate(dict(case, **updates), CASE_REQUIRED_FIELDS)
        with self._lock:
            if 'case_number' in updates:
                self._ensure_unique_number(updates['case_number'], exclude_id=case_id)
            case.update(copy.deepcopy(updates))
        self._record('case_updated', f"Case {case['case_number']} updated", reference=case_id, actor=actor)
        return self._view(case)

    def delete_case(self, case_id, actor=None):
        with self._lock:
            case = self.cases.pop(case_id, None)
        if case is None:
            raise NotFoundError('Case', case_id)
        self._record('case_deleted', f"Case {case['case_number']} deleted", reference=case_id,
                     actor=actor, level='WARNING')
        return True

    def file_pre_filing(self, case_id, case_number, filed_date, actor=None):
        """Convert a drafted pre-filing into an active case once filed"""
        if not case_number:
            raise ValidationError('case_number is required')
        filed = parse_date(filed_date, 'filed_date')
        case = self._get(case_id)
        if case['type'] != 'pre-filing':
            raise ConflictError(f"Only pre-filing cases can be filed (type: {case['type']})")
        with self._lock:
            self._ensure_unique_number(case_number, exclude_id=case_id)
            draft_number = case['case_number']
            case.update({
                'type': 'active',
                'status': 'pending',
                'case_number': case_number,
                'filed_date': filed.isoformat(),
                'pre_filing_number': draft_number,
            })
            case.pop('filing_deadline', None)
        self._record('case_filed', f'{draft_number} filed as {case_number}', reference=case_id, actor=actor)
        return self._view(case)

    # ── Hearings ────────────────────────────────────────────────

    def _active(self, case_id):
        case = self._get(case_id)
        if case['type'] != 'active':
            raise ConflictError(f"Hearings apply to active cases only (type: {case['type']})")
        return case

    @staticmethod
    def _refresh_hearing_dates(case):
        scheduled = sorted(h['date'] for h in case['hearings'] if h['status'] == 'scheduled')
        held = sorted(h['date'] for h in case['hearings'] if h['status'] == 'held')
        case['next_hearing'] = scheduled[0] if scheduled else None
        if held:
            case['last_hearing'] = held[-1]

    def schedule_hearing(self, case_id, date, purpose, actor=None):
        hearing_date = parse_date(date, 'date')
        if hearing_date < self.today():
            raise ValidationError('hearing date must not be in the past')
        if not purpose:
            raise ValidationError('purpose is required')
        case = self._active(case_id)
        hearing = {'id': new_id('hr'), 'date': hearing_date.isoformat(), 'purpose': purpose,
                   'status': 'scheduled', 'outcome': None}
        with self._lock:
            case['hearings'].append(hearing)
            self._refresh_hearing_dates(case)
        self._record('hearing_scheduled', f"Hearing on {hearing['date']} for {case['case_number']}",
                     reference=case_id, actor=actor)
        return hearing

    def record_hearing_outcome(self, case_id, hearing_id, outcome, next_date=None, actor=None):
        if not outcome:
            raise ValidationError('outcome is required')
        case = self._active(case_id)
        for hearing in case['hearings']:
            if hearing['id'] == hearing_id:
                break
        else:
            raise NotFoundError('Hearing', hearing_id)
        if hearing['status'] != 'scheduled':
            raise ConflictError('Hearing outcome already recorded')
        if next_date and parse_date(next_date, 'next_date') <= parse_date(hearing['date'], 'date'):
            raise ValidationError('next_date must be after the hearing date')

        with self._lock:
            hearing['status'] = 'held'
            hearing['outcome'] = outcome
            if next_date:
                case['hearings'].append({'id': new_id('hr'), 'date': parse_date(next_date, 'next_date').isoformat(),
                                         'purpose': f'Adjourned from {hearing["date"]}',
                                         'status': 'scheduled', 'outcome': None})
            self._refresh_hearing_dates(case)
        self._record('hearing_held', f"{case['case_number']}: {outcome}", reference=case_id, actor=actor)
        return self._view(case)

    def close_case(self, case_id, result, actor=None):
        if result not in ('won', 'lost'):
            raise ValidationError('result must be one of: won, lost')
        case = self._active(case_id)
        with self._lock:
            for hearing in case['hearings']:
                if hearing['status'] == 'scheduled':
                    hearing['status'] = 'cancelled'
            case.update({'type': 'closed', 'status': result, 'closed_date': self.today().isoformat(),
                         'next_hearing': None})
        self._record('case_closed', f"{case['case_number']} closed: {result}", reference=case_id, actor=actor)
        return self._view(case)

    # ── Documents and stats ─────────────────────────────────────

    def add_document(self, case_id, document, actor=None):
        errors = require_fields(document, ('name',))
        if errors:
            raise ValidationError(errors)
        case = self._get(case_id)
        record = dict(copy.deepcopy(document), id=new_id('doc'), uploaded_at=self.now_iso(),
                      uploaded_by=actor)
        with self._lock:
            case['documents'].append(record)
            if case['status'] == 'awaiting-docs':
                case['status'] = 'pending'
        return record

    def get_litigation_stats(self, entity=None):
        cases = [c for c in self.cases.values()
                 if not entity or entity in (c.get('entity_name'), c['plaintiff'], c['defendant'])]
        today = self.today().isoformat()
        return {
            'active_cases': sum(1 for c in cases if c['type'] == 'active'),
            'pending_hearings': sum(1 for c in cases
                                    if c['type'] == 'active' and (c.get('next_hearing') or '') >= today),
            'pre_filings': sum(1 for c in cases if c['type'] == 'pre-filing'),
            'closed_cases': sum(1 for c in cases if c['type'] == 'closed'),
        }
