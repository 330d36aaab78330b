"""
Tests for entity management: CRUD, onboarding sections, completion and
MCA verification.
"""
from unittest.mock import Mock, patch

import pytest
import requests

from resolution_desk.core import AuditTrail, ConflictError, DeskError, NotFoundError, ValidationError
from resolution_desk.components.entities import EntityService, MCAClient

from conftest import fixed_clock

COMPANY_CIN = 'U12345MH2020PTC123456'


def _new_company(**overrides):
    payload = {
        'entity_type': 'Company',
        'cin_number': 'U74999DL2019PTC345678',
        'entity_name': 'Delta Castings Pvt Ltd',
        'pan': 'DELTA1234C',
        'registered_email': 'accounts@deltacastings.example',
    }
    payload.update(overrides)
    return payload


class TestEntityCrud:

    def setup_method(self):
        self.audit = AuditTrail(clock=fixed_clock)
        self.service = EntityService(config={}, audit=self.audit, clock=fixed_clock)
        self.service.seed()

    def test_seeded_entities_keyed_by_cin(self):
        entity = self.service.get_entity(COMPANY_CIN)
        assert entity['entity_name'] == 'ABC Enterprises Pvt Ltd'
        assert entity['total_claim_amount'] == 28500000

    def test_create_entity(self):
        entity = self.service.create_entity(_new_company(), actor='ip-001')

        assert entity['id'] == 'U74999DL2019PTC345678'
        assert entity['status'] == 'active'
        assert entity['creditors'] == []
        assert entity['created_at'] == '2024-01-20T10:00:00'
        assert self.audit.get_entries(module='entities')[-1]['action'] == 'entity_created'

    def test_duplicate_cin_conflicts(self):
        with pytest.raises(ConflictError):
            self.service.create_entity(_new_company(cin_number=COMPANY_CIN))

    def test_llp_needs_llpin(self):
        with pytest.raises(ValidationError) as exc:
            self.service.create_entity(_new_company(entity_type='LLP'))
        assert 'cin_number must be a valid LLPIN (e.g. AAB-1234)' in exc.value.details

        entity = self.service.create_entity(_new_company(entity_type='LLP', cin_number='XYZ-9876'))
        assert entity['id'] == 'XYZ-9876'

    def test_validation_collects_every_error(self):
        payload = _new_company(pan='bad', registered_email='nope',
                               bank_accounts=[{'ifsc_code': 'X'}], gstn={'available': True, 'number': ''})
        with pytest.raises(ValidationError) as exc:
            self.service.create_entity(payload)
        assert len(exc.value.details) == 4

    def test_director_contact_must_be_mobile(self):
        directors = [{'name': 'R Mehta', 'contact': '+91 9876543210'},
                     {'name': 'S Rao', 'contact': '12345'}]
        with pytest.raises(ValidationError) as exc:
            self.service.create_entity(_new_company(directors=directors))
        assert exc.value.details == ['directors[1].contact is not a valid mobile number']

        entity = self.service.create_entity(_new_company(directors=directors[:1]))
        assert entity['directors'][0]['contact'] == '+91 9876543210'

    def test_update_cannot_change_cin(self):
        entity = self.service.update_entity(COMPANY_CIN, {'cin_number': 'L00000MH2000PLC000000',
                                                          'status': 'under_cirp'})
        assert entity['cin_number'] == COMPANY_CIN
        assert entity['status'] == 'under_cirp'

    def test_update_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            self.service.update_entity(COMPANY_CIN, {'status': 'dormant'})

    def test_delete(self):
        assert self.service.delete_entity('AAB-1234') is True
        with pytest.raises(NotFoundError):
            self.service.get_entity('AAB-1234')
        with pytest.raises(NotFoundError):
            self.service.delete_entity('AAB-1234')

    def test_list_filters(self):
        assert self.service.get_my_entities(entity_type='llp')['total'] == 1
        assert self.service.get_my_entities(status='under_cirp')['data'][0]['cin_number'] == 'AAB-1234'
        assert self.service.get_my_entities(search='pune')['total'] == 1
        names = [e['entity_name'] for e in self.service.get_my_entities()['data']]
        assert names == sorted(names)

    def test_stats(self):
        stats = self.service.get_entity_stats()
        assert stats['total'] == 2
        assert stats['by_status'] == {'active': 1, 'under_cirp': 1}


class TestOnboardingSections:

    def setup_method(self):
        self.service = EntityService(config={}, audit=AuditTrail(), clock=fixed_clock)
        self.service.seed()

    def test_add_creditor_updates_total(self):
        record = self.service.add_section_item(COMPANY_CIN, 'creditors',
                                               {'name': 'Power Utility', 'class': 'Operational Creditor',
                                                'amount': 1500000})
        assert record['id'].startswith('cr-')
        assert record['status'] == 'Pending'
        assert self.service.get_entity(COMPANY_CIN)['total_claim_amount'] == 30000000

    def test_negative_creditor_amount_rejected(self):
        with pytest.raises(ValidationError):
            self.service.add_section_item(COMPANY_CIN, 'creditors',
                                          {'name': 'X', 'class': 'Operational Creditor', 'amount': -5})

    def test_update_section_item(self):
        record = self.service.update_section_item(COMPANY_CIN, 'creditors', 'cr-002', {'amount': 500000})
        assert record['amount'] == 500000
        assert self.service.get_entity(COMPANY_CIN)['total_claim_amount'] == 25500000

        with pytest.raises(NotFoundError):
            self.service.update_section_item(COMPANY_CIN, 'creditors', 'cr-999', {'amount': 1})

    def test_unknown_section(self):
        with pytest.raises(NotFoundError):
            self.service.list_section(COMPANY_CIN, 'shareholders')

    def test_industry_details_validated(self):
        with pytest.raises(ValidationError) as exc:
            self.service.update_industry_details(COMPANY_CIN, [{'industry': '', 'sales_value': -1}])
        assert len(exc.value.details) == 2

    def test_profile_completion(self):
        completion = self.service.profile_completion(COMPANY_CIN)
        assert completion['missing_steps'] == ['bank_documents']
        assert completion['percentage'] == 86

        self.service.add_section_item(COMPANY_CIN, 'bank_documents',
                                      {'bank_name': 'SBI', 'document_type': 'Statement',
                                       'document_date': '2023-12-31'})
        assert self.service.profile_completion(COMPANY_CIN)['percentage'] == 100


class TestMcaVerification:

    def test_bundled_registry_lookup(self):
        service = EntityService(config={}, audit=AuditTrail(), clock=fixed_clock)
        result = service.verify_with_mca(COMPANY_CIN)
        assert result['entity_name'] == 'ABC Enterprises Pvt Ltd'

    def test_unknown_cin_returns_empty(self):
        service = EntityService(config={}, audit=AuditTrail(), clock=fixed_clock)
        assert service.verify_with_mca('U99999MH2020PTC999999') == {}

    def test_malformed_cin_rejected(self):
        service = EntityService(config={}, audit=AuditTrail(), clock=fixed_clock)
        with pytest.raises(ValidationError):
            service.verify_with_mca('12345')

    @patch('resolution_desk.components.entities.mca_client.requests.get')
    def test_remote_lookup(self, mock_get):
        mock_get.return_value = Mock(status_code=200, json=Mock(return_value={'entity_name': 'Remote Ltd'}))
        client = MCAClient(base_url='https://mca.example/api/', timeout=2)

        assert client.lookup(COMPANY_CIN) == {'entity_name': 'Remote Ltd'}
        mock_get.assert_called_once_with(f'https://mca.example/api/companies/{COMPANY_CIN}', timeout=2)

    @patch('resolution_desk.components.entities.mca_client.requests.get')
    def test_remote_not_found(self, mock_get):
        mock_get.return_value = Mock(status_code=404)
        assert MCAClient(base_url='https://mca.example').lookup(COMPANY_CIN) == {}

    @patch('resolution_desk.components.entities.mca_client.requests.get')
    def test_remote_failure_maps_to_503(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('refused')
        with pytest.raises(DeskError) as exc:
            MCAClient(base_url='https://mca.example').lookup(COMPANY_CIN)
        assert exc.value.status_code == 503


class TestEntityRoutes:

    def test_list_and_get(self, client):
        response = client.get('/api/entities?limit=1')
        assert response.status_code == 200
        body = response.get_json()
        assert body['total'] == 2
        assert len(body['data']) == 1

        assert client.get(f'/api/entities/{COMPANY_CIN}').get_json()['entity_name'] == 'ABC Enterprises Pvt Ltd'

    def test_missing_entity_is_404(self, client):
        response = client.get('/api/entities/U00000MH2000PTC000000')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Entity not found: U00000MH2000PTC000000'}

    def test_create_validation_error(self, client):
        response = client.post('/api/entities', json={'entity_type': 'Company'})
        assert response.status_code == 400
        assert 'cin_number is required' in response.get_json()['details']

    def test_create_and_add_creditor(self, client):
        assert client.post('/api/entities', json=_new_company()).status_code == 201
        response = client.post('/api/entities/U74999DL2019PTC345678/creditors',
                               json={'name': 'HDFC Bank', 'class': 'Financial Creditor', 'amount': 100})
        assert response.status_code == 201
        assert client.get('/api/entities/U74999DL2019PTC345678').get_json()['total_claim_amount'] == 100

    def test_verify(self, client):
        response = client.get(f'/api/entities/verify/{COMPANY_CIN}')
        assert response.status_code == 200
        assert response.get_json()['roc_name'] == 'Registrar of Companies - Mumbai'

    def test_completion(self, client):
        assert client.get(f'/api/entities/{COMPANY_CIN}/completion').get_json()['percentage'] == 86

    def test_missing_body(self, client):
        response = client.post('/api/entities')
        assert response.status_code == 400
        assert response.get_json()['error'] == 'No data received'
