"""
Tests for litigation tracking: tabs, pre-filings, hearings and closure
"""
from datetime import datetime

import pytest

from resolution_desk.core import AuditTrail, ConflictError, NotFoundError, ValidationError
from resolution_desk.components.litigation import LitigationService

# The demo docket is dated around January 2025
LIT_NOW = datetime(2025, 1, 25, 9, 0)


def litigation_clock():
    return LIT_NOW


def _active_case(**overrides):
    payload = {
        'case_number': 'CP(IB)-777/MB/2025',
        'title': 'Acme Corporation Ltd vs Zeta Metals',
        'court': 'NCLT Mumbai',
        'plaintiff': 'Acme Corporation Ltd',
        'defendant': 'Zeta Metals',
        'filed_date': '2025-01-22',
        'next_hearing': '2025-02-10',
        'amount': 2500000,
    }
    payload.update(overrides)
    return payload


class TestCaseListing:

    def setup_method(self):
        self.service = LitigationService(config={}, audit=AuditTrail(), clock=litigation_clock)
        self.service.seed()

    def _ids(self, **kwargs):
        return [c['id'] for c in self.service.list_cases(**kwargs)]

    def test_tabs(self):
        assert self._ids(tab='upcoming') == ['ac-001', 'ac-002']
        assert self._ids(tab='in-progress') == ['ac-002', 'ac-003']
        assert self._ids(tab='completed') == ['cl-001', 'cl-002']
        assert self._ids(tab='drafts') == ['pf-001', 'pf-002']

    def test_sorting(self):
        assert self._ids(sort_by='oldest')[0] == 'cl-002'
        titles = [c['title'] for c in self.service.list_cases(sort_by='alphabetical')]
        assert titles == sorted(titles, key=str.lower)

    def test_filters(self):
        assert self._ids(case_type='closed', status='lost') == ['cl-002']
        assert self._ids(search='beta') == ['ac-001']
        assert len(self._ids(entity='Acme Corporation Ltd')) == 3

    def test_bad_tab_or_sort(self):
        with pytest.raises(ValidationError):
            self.service.list_cases(tab='archived')
        with pytest.raises(ValidationError):
            self.service.list_cases(sort_by='priority')

    def test_days_left(self):
        assert self.service.get_case('pf-001')['days_left'] == 5
        assert self.service.get_case('ac-002')['days_left'] == 21
        assert self.service.get_case('cl-001')['days_left'] is None

    def test_stats(self):
        assert self.service.get_litigation_stats() == {
            'active_cases': 3, 'pending_hearings': 2, 'pre_filings': 2, 'closed_cases': 2,
        }
        assert self.service.get_litigation_stats('TechSolutions Pvt Ltd')['closed_cases'] == 1


class TestCaseRecords:

    def setup_method(self):
        self.audit = AuditTrail(clock=litigation_clock)
        self.service = LitigationService(config={}, audit=self.audit, clock=litigation_clock)
        self.service.seed()

    def test_pre_filing_numbering(self):
        case = self.service.create_pre_filing({'title': 'Recovery petition', 'court': 'DRT Mumbai',
                                               'plaintiff': 'Acme Corporation Ltd', 'defendant': 'Kappa Ltd'})
        assert case['case_number'] == 'PRE-2025-003'
        assert case['status'] == 'draft'
        assert case['entity_name'] == 'Acme Corporation Ltd'

    def test_active_case_gets_first_hearing(self):
        case = self.service.create_active_case(_active_case())
        assert case['type'] == 'active'
        assert case['status'] == 'pending'
        assert case['hearings'][0]['date'] == '2025-02-10'

    def test_duplicate_case_number(self):
        with pytest.raises(ConflictError):
            self.service.create_active_case(_active_case(case_number='CS-789/2024'))

    def test_hearing_before_filing_rejected(self):
        with pytest.raises(ValidationError):
            self.service.create_active_case(_active_case(next_hearing='2025-01-01'))

    def test_validation_collects_errors(self):
        with pytest.raises(ValidationError) as exc:
            self.service.create_pre_filing({'title': 'x', 'court': 'y', 'plaintiff': 'p',
                                            'defendant': 'd', 'amount': -1, 'priority': 'urgent'})
        assert len(exc.value.details) == 2

    def test_update_ignores_immutable_fields(self):
        case = self.service.update_case('ac-001', {'type': 'closed', 'priority': 'critical'})
        assert case['type'] == 'active'
        assert case['priority'] == 'critical'

    def test_update_cannot_blank_core_fields(self):
        with pytest.raises(ValidationError) as exc:
            self.service.update_case('ac-001', {'title': None, 'court': '  '})
        assert exc.value.details == ['title is required', 'court is required']
        assert self.service.get_case('ac-001')['title']

    def test_alphabetical_sort_tolerates_missing_title(self):
        self.service.cases['ac-001'].pop('title')
        titles = [c.get('title') for c in self.service.list_cases(sort_by='alphabetical')]
        assert titles[0] is None
        assert len(titles) == 7

    def test_file_pre_filing(self):
        case = self.service.file_pre_filing('pf-001', 'CP(IB)-900/MB/2025', '2025-01-24')
        assert case['type'] == 'active'
        assert case['pre_filing_number'] == 'PRE-2025-001'
        assert 'filing_deadline' not in case

        with pytest.raises(ConflictError):
            self.service.file_pre_filing('ac-001', 'X-1', '2025-01-24')

    def test_delete(self):
        assert self.service.delete_case('pf-002') is True
        with pytest.raises(NotFoundError):
            self.service.delete_case('pf-002')
        assert self.audit.get_entries(level_filter='WARNING')[-1]['action'] == 'case_deleted'

    def test_document_clears_awaiting_docs(self):
        self.service.add_document('ac-003', {'name': 'Vakalatnama.pdf'}, actor='lawyer-1')
        assert self.service.get_case('ac-003')['status'] == 'pending'


class TestHearings:

    def setup_method(self):
        self.service = LitigationService(config={}, audit=AuditTrail(), clock=litigation_clock)
        self.service.seed()

    def test_schedule_moves_next_hearing(self):
        self.service.schedule_hearing('ac-002', '2025-02-01', 'Interim application')
        assert self.service.get_case('ac-002')['next_hearing'] == '2025-02-01'

    def test_past_hearing_rejected(self):
        with pytest.raises(ValidationError, match='in the past'):
            self.service.schedule_hearing('ac-002', '2025-01-01', 'Mention')

    def test_hearings_only_for_active_cases(self):
        with pytest.raises(ConflictError):
            self.service.schedule_hearing('pf-001', '2025-02-01', 'Mention')

    def test_record_outcome_with_adjournment(self):
        case = self.service.record_hearing_outcome('ac-002', 'hr-003', 'Adjourned', next_date='2025-03-10')
        assert case['next_hearing'] == '2025-03-10'
        assert case['last_hearing'] == '2025-02-15'

        with pytest.raises(ConflictError):
            self.service.record_hearing_outcome('ac-002', 'hr-003', 'Again')

    def test_adjournment_must_follow_hearing(self):
        with pytest.raises(ValidationError):
            self.service.record_hearing_outcome('ac-002', 'hr-003', 'Adjourned', next_date='2025-02-15')

    def test_close_cancels_scheduled_hearings(self):
        case = self.service.close_case('ac-001', 'won')
        assert case['type'] == 'closed'
        assert case['closed_date'] == '2025-01-25'
        assert case['hearings'][0]['status'] == 'cancelled'
        assert case['days_left'] is None

        with pytest.raises(ValidationError):
            self.service.close_case('ac-002', 'settled')


class TestLitigationRoutes:

    def test_list(self, client):
        body = client.get('/api/litigation/cases?tab=drafts').get_json()
        assert body['total'] == 2

    def test_create_pre_filing_by_default(self, client):
        response = client.post('/api/litigation/cases', json={'title': 'Draft', 'court': 'NCLT',
                                                               'plaintiff': 'A', 'defendant': 'B'})
        assert response.status_code == 201
        assert response.get_json()['type'] == 'pre-filing'

    def test_create_active(self, client):
        response = client.post('/api/litigation/cases', json=dict(_active_case(), type='active'))
        assert response.status_code == 201

    def test_close_and_stats(self, client):
        assert client.post('/api/litigation/cases/ac-003/close', json={'result': 'lost'}).status_code == 200
        assert client.get('/api/litigation/stats').get_json()['closed_cases'] == 3

    def test_missing_case(self, client):
        response = client.get('/api/litigation/cases/nope')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Case not found: nope'}

    def test_null_title_is_400(self, client):
        response = client.put('/api/litigation/cases/ac-002', json={'title': None})
        assert response.status_code == 400
        assert client.get('/api/litigation/cases?sort_by=alphabetical').status_code == 200
