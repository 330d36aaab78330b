"""
Tests for claim intake, verification and admission
"""
import pytest

from resolution_desk.core import AuditTrail, ConflictError, NotFoundError, ValidationError
from resolution_desk.components.claims import ClaimService

from conftest import fixed_clock

DECLARATIONS = {
    'accuracy_declaration': True,
    'legal_consequences_acknowledgment': True,
    'duplicate_claim_declaration': True,
    'communication_consent': True,
}


def _submission(**overrides):
    payload = {
        'claimant_name': 'Steel Traders Co',
        'claimant_category': 'Operational Creditor',
        'principal_amount': 1000000,
        'declarations': dict(DECLARATIONS),
    }
    payload.update(overrides)
    return payload


class TestClaimIntake:

    def setup_method(self):
        self.audit = AuditTrail(clock=fixed_clock)
        self.service = ClaimService(config={}, audit=self.audit, clock=fixed_clock)
        self.service.seed()

    def test_submit_without_interest(self):
        claim = self.service.submit_claim(_submission())

        assert claim['status'] == 'open'
        assert claim['source'] == 'claimant_submitted'
        assert claim['claimed_amount'] == 1000000
        assert claim['verification']['platform_amount'] == 1000000
        assert claim['submission_date'] == '2024-01-20'

    def test_submit_with_interest(self):
        claim = self.service.submit_claim(_submission(interest_claimed=True,
                                                      interest_from_date='2023-01-20'))
        assert claim['interest_amount'] == 120000
        assert claim['claimed_amount'] == 1120000

    def test_interest_needs_past_start_date(self):
        with pytest.raises(ValidationError, match='interest_from_date is required'):
            self.service.submit_claim(_submission(interest_claimed=True))
        with pytest.raises(ValidationError, match='must not be in the future'):
            self.service.submit_claim(_submission(interest_claimed=True, interest_from_date='2024-06-01'))

    def test_declarations_required(self):
        declarations = dict(DECLARATIONS, communication_consent=False)
        with pytest.raises(ValidationError) as exc:
            self.service.submit_claim(_submission(declarations=declarations))
        assert exc.value.message == 'declarations not accepted: communication_consent'

    def test_zero_principal_rejected(self):
        with pytest.raises(ValidationError):
            self.service.submit_claim(_submission(principal_amount=0))

    def test_team_upload(self):
        claim = self.service.upload_claim({'claimant_name': 'Transport Co', 'claimant_category':
                                           'Operational Creditor', 'claimed_amount': 300000,
                                           'interest_amount': 20000}, uploaded_by='admin')
        assert claim['status'] == 'allocation_pending'
        assert claim['principal_amount'] == 280000
        assert claim['uploaded_by'] == 'admin'

    def test_upload_interest_cannot_exceed_claim(self):
        with pytest.raises(ValidationError):
            self.service.upload_claim({'claimant_name': 'X', 'claimant_category': 'Y',
                                       'claimed_amount': 10, 'interest_amount': 20}, uploaded_by='admin')

    def test_update_recomputes_claimed_amount(self):
        claim = self.service.update_claim('INV003', {'interest_amount': 50000})
        assert claim['claimed_amount'] == 800000

    def test_update_locked_after_verification(self):
        with pytest.raises(ConflictError):
            self.service.update_claim('INV004', {'principal_amount': 1})
        with pytest.raises(ValidationError, match='status'):
            self.service.update_claim('INV003', {'status': 'accepted'})

    def test_admitted_claim_cannot_be_deleted(self):
        with pytest.raises(ConflictError):
            self.service.delete_claim('INV002')
        assert self.service.delete_claim('INV003') is True
        with pytest.raises(NotFoundError):
            self.service.get_claim('INV003')


class TestClaimListing:

    def setup_method(self):
        self.service = ClaimService(config={}, audit=AuditTrail(), clock=fixed_clock)
        self.service.seed()

    def test_default_sort_is_latest(self):
        ids = [c['id'] for c in self.service.list_claims()['data']]
        assert ids == ['INV001', 'INV003', 'INV002', 'INV004']

    def test_amount_sort(self):
        ids = [c['id'] for c in self.service.list_claims(sort_by='amount_low')['data']]
        assert ids == ['INV003', 'INV004', 'INV002', 'INV001']

    def test_tab_pins_status(self):
        result = self.service.list_claims(tab='admission', status='accepted')
        assert [c['id'] for c in result['data']] == ['INV004']

    def test_team_uploaded_tab_pins_source(self):
        result = self.service.list_claims(tab='team_uploaded')
        assert [c['id'] for c in result['data']] == ['INV003']

    def test_search(self):
        assert self.service.list_claims(search='bank')['total'] == 2

    def test_bad_tab(self):
        with pytest.raises(ValidationError):
            self.service.list_claims(tab='archive')


class TestVerificationAndAdmission:

    def setup_method(self):
        self.audit = AuditTrail(clock=fixed_clock)
        self.service = ClaimService(config={}, audit=self.audit, clock=fixed_clock)
        self.service.seed()

    def test_allocate(self):
        claim = self.service.allocate_claim('INV003', 'Jane Smith')
        assert claim['status'] == 'verification_pending'
        with pytest.raises(ConflictError):
            self.service.allocate_claim('INV003', 'Jane Smith')

    def test_save_verification(self):
        claim = self.service.save_verification('INV001', {'verifier_amount': 4700000,
                                                          'checklist': {'msme_registered': True}})
        assert claim['verification']['verifier_amount'] == 4700000
        assert claim['verification']['checklist']['msme_registered'] is True
        assert claim['verification']['verification_status'] == 'ongoing'

    def test_verifier_amount_capped_at_claim(self):
        with pytest.raises(ValidationError, match='must not exceed'):
            self.service.save_verification('INV001', {'verifier_amount': 6000000})

    def test_unknown_checklist_item(self):
        with pytest.raises(ValidationError):
            self.service.save_verification('INV001', {'checklist': {'gut_feeling': True}})

    def test_edit_after_completion_marks_modified(self):
        claim = self.service.save_verification('INV004', {'verifier_remarks': 'Revised'})
        assert claim['verification']['verification_status'] == 'modification_done'

    def test_complete_requires_amount(self):
        self.service.allocate_claim('INV003', 'Jane Smith')
        with pytest.raises(ValidationError, match='admissible amount'):
            self.service.complete_verification('INV003', 'Jane Smith')

    def test_accept_platform_figure(self):
        claim = self.service.accept_platform_figure('INV001', 'John Doe')
        assert claim['verification']['verifier_amount'] == 4800000
        assert claim['status'] == 'admission_pending'
        assert claim['verified_by'] == 'John Doe'

    def test_admit_defaults_to_verified_amount(self):
        claim = self.service.admit_claim('INV004', 'Jane Smith')
        assert claim['status'] == 'accepted'
        assert claim['admitted_amount'] == 1150000

    def test_admit_cannot_exceed_verified(self):
        with pytest.raises(ValidationError):
            self.service.admit_claim('INV004', 'Jane Smith', amount=1200000)
        with pytest.raises(ConflictError):
            self.service.admit_claim('INV001', 'Jane Smith')

    def test_reject(self):
        claim = self.service.reject_claim('INV001', 'Duplicate of earlier claim', actor='John Doe')
        assert claim['status'] == 'rejected'
        with pytest.raises(ConflictError):
            self.service.reject_claim('INV001', 'again')

    def test_queries(self):
        query = self.service.add_query('INV001', '  Share the sanction letter ')
        assert query['id'] == 'q2'
        assert query['question'] == 'Share the sanction letter'

        answered = self.service.respond_to_query('INV001', 'q2', 'Uploaded')
        assert answered['response'] == 'Uploaded'
        with pytest.raises(NotFoundError):
            self.service.respond_to_query('INV001', 'q9', 'x')

    def test_stats(self):
        stats = self.service.get_claim_stats()
        assert stats['total'] == 4
        assert stats['total_claimed'] == 9450000
        assert stats['total_admitted'] == 2400000
        assert stats['admission_ratio'] == 25
        assert stats['by_status']['open'] == 0

    def test_claim_audit_log(self):
        self.service.allocate_claim('INV003', 'Jane Smith', actor='admin')
        self.service.save_verification('INV003', {'verifier_amount': 700000})
        log = self.service.get_claim_audit_log('INV003')
        assert [e['action'] for e in log] == ['claim_allocated', 'verification_saved']


class TestClaimRoutes:

    def test_list(self, client):
        body = client.get('/api/claims?tab=verification').get_json()
        assert body['total'] == 1

    def test_submit_and_team_upload(self, client):
        assert client.post('/api/claims', json=_submission()).status_code == 201

        response = client.post('/api/claims', json={'source': 'team_uploaded', 'claimant_name': 'X',
                                                    'claimant_category': 'Operational Creditor',
                                                    'claimed_amount': 1000},
                               headers={'X-User-Id': 'admin'})
        assert response.get_json()['uploaded_by'] == 'admin'

    def test_admit_with_empty_body(self, client):
        response = client.post('/api/claims/INV004/admit', headers={'X-User-Id': 'Jane Smith'})
        assert response.status_code == 200
        assert response.get_json()['admitted_by'] == 'Jane Smith'

    def test_reject_needs_reason(self, client):
        assert client.post('/api/claims/INV001/reject', json={}).status_code == 400

    def test_audit_log_route(self, client):
        client.post('/api/claims/INV003/allocate', json={'assignee': 'Jane Smith'})
        log = client.get('/api/claims/INV003/audit-log').get_json()
        assert log[0]['action'] == 'claim_allocated'

    def test_missing_claim(self, client):
        assert client.get('/api/claims/INV999').status_code == 404
