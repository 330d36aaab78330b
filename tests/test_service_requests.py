"""
Tests for service requests, bidding, negotiation threads, queries and the
provider opportunity view.
"""
from datetime import datetime

import pytest

from resolution_desk.core import AuditTrail, ConflictError, NotFoundError, ValidationError
from resolution_desk.components.service_requests import ServiceRequestService

from conftest import fixed_clock


def _make_service(clock=fixed_clock):
    service = ServiceRequestService(config={'PLATFORM_FEE_RATE': 0.10, 'GST_RATE': 0.18,
                                            'DEFAULT_SR_DEADLINE_DAYS': 30},
                                    audit=AuditTrail(clock=clock), clock=clock)
    service.seed()
    return service


def _bid_payload(provider_id='provider-002', fee=60000, **overrides):
    payload = {
        'service_request_id': 'sr-001',
        'provider_id': provider_id,
        'provider_name': 'Mehta Valuers LLP',
        'delivery_date': '2024-02-20',
        'financials': {'professional_fee': fee, 'payment_structure': 'lump_sum'},
    }
    payload.update(overrides)
    return payload


class TestServiceRequestLifecycle:

    def setup_method(self):
        self.service = _make_service()

    def test_create_draft(self):
        request = self.service.create_service_request({'title': 'Forensic audit'}, actor='seeker-009')

        assert request['status'] == 'draft'
        assert request['srn_number'] == 'SRN2024003'
        assert request['deadline'] == '2024-02-19'
        assert request['created_by'] == 'seeker-009'

    def test_create_rejects_bad_budget(self):
        with pytest.raises(ValidationError) as exc:
            self.service.create_service_request({'title': 'x', 'budget_range': {'min': 10, 'max': 5}})
        assert 'budget_range.min must not exceed budget_range.max' in exc.value.details

    def test_create_rejects_unknown_service_type(self):
        with pytest.raises(ValidationError):
            self.service.create_service_request({'title': 'x', 'service_types': ['astrology']})

    def test_publish(self):
        request = self.service.publish_service_request('sr-002')
        assert request['status'] == 'open'
        assert request['published_at'] == '2024-01-20T10:00:00'

    def test_publish_requires_complete_request(self):
        draft = self.service.create_service_request({'title': 'Bare request'})
        with pytest.raises(ValidationError) as exc:
            self.service.publish_service_request(draft['id'])
        assert 'scope_of_work is required' in exc.value.details
        assert 'at least one service type is required' in exc.value.details

    def test_publish_only_drafts(self):
        with pytest.raises(ConflictError):
            self.service.publish_service_request('sr-001')

    def test_list_filters_and_sorting(self):
        result = self.service.get_service_requests()
        assert [r['id'] for r in result['data']] == ['sr-002', 'sr-001']

        assert self.service.get_service_requests(status=['draft'])['total'] == 1
        assert self.service.get_service_requests(srn_number='2024001')['data'][0]['id'] == 'sr-001'
        assert self.service.get_service_requests(budget_min=45000)['total'] == 1
        assert self.service.get_service_requests(service_types=['gst_compliance'])['total'] == 1

    def test_locked_after_award(self):
        self.service.accept_bid('bid-001')
        with pytest.raises(ConflictError):
            self.service.update_service_request('sr-001', {'title': 'Changed'})

    def test_update_keeps_protected_fields(self):
        request = self.service.update_service_request('sr-002', {'status': 'closed', 'title': 'GST Review'})
        assert request['status'] == 'draft'
        assert request['title'] == 'GST Review'

    def test_cancel_expires_active_bids(self):
        self.service.cancel_service_request('sr-001', reason='Deal called off')
        assert self.service.get_service_request('sr-001')['status'] == 'cancelled'
        assert self.service.get_bid('bid-001')['status'] == 'expired'

        with pytest.raises(ConflictError):
            self.service.cancel_service_request('sr-001')

    def test_delete(self):
        assert self.service.delete_service_request('sr-001') is True
        assert self.service.delete_service_request('sr-001') is False
        with pytest.raises(NotFoundError):
            self.service.get_bid('bid-001')

    def test_stats(self):
        stats = self.service.get_service_request_stats('seeker-001')
        assert stats == {'total': 2, 'open': 1, 'closed': 0, 'draft': 1, 'bids_received': 1}


class TestBidding:

    def setup_method(self):
        self.service = _make_service()

    def test_submit_bid_computes_fees(self):
        bid = self.service.submit_bid(_bid_payload())

        assert bid['bid_number'] == 'BID2024002'
        assert bid['financials']['platform_fee'] == 6000
        assert bid['financials']['gst'] == 11880
        assert bid['financials']['total_amount'] == 77880
        assert bid['is_invited'] is False

    def test_one_active_bid_per_provider(self):
        with pytest.raises(ConflictError):
            self.service.submit_bid(_bid_payload(provider_id='provider-001'))

    def test_bidding_closed_after_deadline(self):
        late = _make_service(clock=lambda: datetime(2024, 3, 1, 9, 0))
        with pytest.raises(ConflictError, match='deadline'):
            late.submit_bid(_bid_payload())

    def test_draft_request_not_biddable(self):
        with pytest.raises(ConflictError):
            self.service.submit_bid(_bid_payload(service_request_id='sr-002'))

    def test_milestone_bid_needs_milestones(self):
        payload = _bid_payload(financials={'professional_fee': 1000, 'payment_structure': 'milestone_based'})
        with pytest.raises(ValidationError):
            self.service.submit_bid(payload)

    def test_bid_listing(self):
        self.service.submit_bid(_bid_payload())
        totals = [b['financials']['total_amount'] for b in self.service.get_bids_for_service_request('sr-001')]
        assert totals == [77880, 97350]

        assert len(self.service.get_bids_for_service_request('sr-001', invited_only=True)) == 1
        assert len(self.service.get_bids_for_service_request('sr-001', amount_max=80000)) == 1

    def test_update_bid_recomputes_total(self):
        bid = self.service.update_bid('bid-001', {'financials': {'professional_fee': 80000}})
        assert bid['financials']['total_amount'] == 103840
        assert bid['financials']['payment_structure'] == 'lump_sum'

    def test_accept_rejects_other_bids(self):
        other = self.service.submit_bid(_bid_payload())
        self.service.accept_bid('bid-001')

        assert self.service.get_bid(other['id'])['status'] == 'rejected'
        request = self.service.get_service_request('sr-001')
        assert request['status'] == 'bid_accepted'
        assert request['accepted_bid_id'] == 'bid-001'

    def test_withdrawn_bid_cannot_be_accepted(self):
        self.service.withdraw_bid('bid-001')
        with pytest.raises(ConflictError):
            self.service.accept_bid('bid-001')

    def test_mark_work_order_issued_requires_award(self):
        with pytest.raises(ConflictError):
            self.service.mark_work_order_issued('sr-001', 'wo-1')
        self.service.accept_bid('bid-001')
        assert self.service.mark_work_order_issued('sr-001', 'wo-1')['status'] == 'work_order_issued'

    def test_export_bids(self):
        csv_text = self.service.export_bids('sr-001')
        lines = csv_text.strip().splitlines()
        assert lines[0].startswith('bid_number,provider_name,status')
        assert lines[1].startswith('BID2024001,CA Rajesh Kumar & Associates,submitted')


class TestNegotiation:

    def setup_method(self):
        self.service = _make_service()
        self.thread = self.service.initiate_negotiation('sr-001', 'bid-001', ['adjust_fee'],
                                                        initiated_by='seeker-001')

    def test_initiate_moves_statuses(self):
        assert self.service.get_bid('bid-001')['status'] == 'under_negotiation'
        assert self.service.get_service_request('sr-001')['status'] == 'under_negotiation'

    def test_input_requires_reason_fields(self):
        with pytest.raises(ValidationError) as exc:
            self.service.submit_negotiation_input(self.thread['id'],
                                                  {'reason': 'adjust_fee', 'data': {'suggested_fee': 70000}})
        assert 'justification is required for adjust_fee' in exc.value.details

    def test_input_must_match_thread_reasons(self):
        with pytest.raises(ValidationError):
            self.service.submit_negotiation_input(self.thread['id'], {'reason': 'request_info',
                                                                      'data': {'clarification_needed': 'x'}})

    def test_close_agreed(self):
        self.service.submit_negotiation_input(
            self.thread['id'],
            {'reason': 'adjust_fee', 'data': {'suggested_fee': 70000, 'justification': 'Market rate'}},
            sender='seeker-001')
        thread = self.service.close_negotiation(self.thread['id'], 'agreed')

        assert thread['status'] == 'closed'
        assert len(thread['messages']) == 1
        assert self.service.get_bid('bid-001')['status'] == 'under_review'
        assert self.service.get_service_request('sr-001')['status'] == 'bid_received'

    def test_close_declined_rejects_bid(self):
        self.service.close_negotiation(self.thread['id'], 'declined')
        assert self.service.get_bid('bid-001')['status'] == 'rejected'

        with pytest.raises(ConflictError):
            self.service.close_negotiation(self.thread['id'], 'agreed')

    def test_declined_negotiation_is_not_a_missed_opportunity(self):
        self.service.close_negotiation(self.thread['id'], 'declined')
        assert self.service.get_opportunity_stats('provider-001')['missed'] == 0

    def test_deleting_request_drops_threads_and_queries(self):
        query = self.service.post_query('sr-001', 'provider-001', 'Is a site visit needed?')

        assert self.service.delete_service_request('sr-001') is True
        with pytest.raises(NotFoundError):
            self.service.get_negotiation(self.thread['id'])
        assert query['id'] not in self.service.queries
        assert self.service.get_negotiations_for_service_request('sr-001') == []


class TestQueriesAndOpportunities:

    def setup_method(self):
        self.service = _make_service()

    def test_private_queries_visible_to_participants(self):
        self.service.post_query('sr-001', 'provider-002', 'Is a site visit expected?')
        self.service.post_query('sr-001', 'seeker-001', 'Fee breakup please', is_public=False,
                                recipients=['provider-001'])

        assert len(self.service.get_queries_for_service_request('sr-001', 'provider-002')) == 1
        assert len(self.service.get_queries_for_service_request('sr-001', 'provider-001')) == 2

    def test_private_query_needs_recipient(self):
        with pytest.raises(ValidationError):
            self.service.post_query('sr-001', 'seeker-001', 'hello', is_public=False)

    def test_respond_to_query(self):
        query = self.service.post_query('sr-001', 'provider-002', 'Timeline flexible?')
        updated = self.service.respond_to_query(query['id'], 'seeker-001', 'Yes, by a week')
        assert updated['responses'][0]['message'] == 'Yes, by a week'

    def test_opportunities_for_provider(self):
        result = self.service.get_opportunities('provider-001')
        assert result['total'] == 1
        opportunity = result['data'][0]
        assert opportunity['my_bid_id'] == 'bid-001'
        assert opportunity['is_invited'] is True

    def test_not_interested_hides_opportunity(self):
        self.service.mark_opportunity_not_interested('provider-002', 'sr-001', reason='Out of scope')
        assert self.service.get_opportunities('provider-002')['total'] == 0

    def test_opportunity_stats(self):
        assert self.service.get_opportunity_stats('provider-001') == {
            'total': 1, 'open': 0, 'bid_submitted': 1, 'won': 0, 'missed': 0,
        }
        self.service.accept_bid('bid-001')
        assert self.service.get_opportunity_stats('provider-001')['won'] == 1

    def test_missed_only_when_another_bid_wins(self):
        other = self.service.submit_bid(_bid_payload())
        self.service.accept_bid(other['id'])
        assert self.service.get_opportunity_stats('provider-001')['missed'] == 1

    def test_cancelled_request_is_not_missed(self):
        self.service.cancel_service_request('sr-001', reason='Scope changed')
        stats = self.service.get_opportunity_stats('provider-001')
        assert stats['missed'] == 0
        assert stats['won'] == 0

    def test_bulk_allocate(self):
        allocations = self.service.bulk_allocate_opportunities(['sr-001', 'sr-002'], 'provider-001',
                                                               'member-7', allocated_by='provider-001')
        assert set(allocations) == {'sr-001', 'sr-002'}
        assert self.service.get_opportunities('provider-001')['data'][0]['allocation']['member_id'] == 'member-7'

        with pytest.raises(NotFoundError):
            self.service.bulk_allocate_opportunities(['sr-404'], 'provider-001', 'member-7')

    def test_ai_suggestions(self):
        suggestions = self.service.get_ai_suggestions('Need valuation for a merger under IBC')
        assert suggestions['professional_types'] == ['valuer', 'chartered_accountant', 'insolvency_professional']
        assert 'valuation_lb_ibc' in suggestions['service_types']
        assert 'Financial Statements' in suggestions['documents_checklist']

    def test_ai_suggestions_fallback(self):
        assert self.service.get_ai_suggestions('Something unusual')['service_types'] == ['others']


class TestServiceRequestRoutes:

    def test_list_requests(self, client):
        body = client.get('/api/service-requests?status=draft,open').get_json()
        assert body['total'] == 1
        assert body['data'][0]['id'] == 'sr-002'

    def test_list_rejects_unknown_sort(self, client):
        response = client.get('/api/service-requests?sort_by=budget_range')
        assert response.status_code == 400
        assert 'sort_by must be one of' in response.get_json()['error']
        assert client.get('/api/service-requests?sort_order=up').status_code == 400
        assert client.get('/api/service-requests?sort_by=deadline&sort_order=asc').status_code == 200

    def test_submit_bid_route(self, client):
        response = client.post('/api/service-requests/sr-001/bids',
                               json={'provider_id': 'provider-003', 'delivery_date': '2024-02-25',
                                     'financials': {'professional_fee': 50000}},
                               headers={'X-User-Id': 'provider-003'})
        assert response.status_code == 201
        assert response.get_json()['financials']['total_amount'] == 64900

    def test_accept_bid_route(self, client):
        assert client.post('/api/bids/bid-001/accept').get_json()['status'] == 'accepted'
        assert client.post('/api/bids/bid-001/accept').status_code == 409

    def test_export_is_csv(self, client):
        response = client.get('/api/service-requests/export')
        assert response.mimetype == 'text/csv'
        assert response.get_data(as_text=True).startswith('srn_number,title,status')

    def test_opportunities_need_provider(self, client):
        assert client.get('/api/opportunities').status_code == 400
        response = client.get('/api/opportunities', headers={'X-User-Id': 'provider-001'})
        assert response.get_json()['total'] == 1

    def test_delete_missing_request(self, client):
        assert client.delete('/api/service-requests/sr-404').status_code == 404

    def test_ai_suggestions_route(self, client):
        response = client.post('/api/service-requests/ai-suggestions',
                               json={'description': 'GST input credit reconciliation'})
        assert response.get_json()['service_types'] == ['gst_compliance']
