"""
Unit tests for the shared core helpers: money, listing, validators,
identifiers and the audit trail.
"""
from datetime import date

import pytest

from resolution_desk.config.settings import DeskConfig
from resolution_desk.core import AuditTrail, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import SequenceGenerator, new_id
from resolution_desk.core.money import (
    compute_fee_breakdown, format_inr, percentage, round_half_up, simple_interest, split_payment_terms,
)
from resolution_desk.core.pagination import (
    in_date_range, matches_search, paginate, parse_pagination, sort_records,
)
from resolution_desk.core.validators import (
    is_valid_cin, is_valid_email, is_valid_ifsc, is_valid_indian_mobile, is_valid_pan, parse_date,
    require_fields,
)
from resolution_desk.components.service_requests.models import PaymentStructure
from resolution_desk.core.validators import ensure_choice

from conftest import fixed_clock


class TestFeeBreakdown:
    """Platform fee, GST and totals derived from a professional fee."""

    def test_worked_example(self):
        result = compute_fee_breakdown(150000, reimbursements=5000, regulatory_payouts=2000, ope=1000)

        assert result['platform_fee'] == 15000
        assert result['gst'] == 29700
        assert result['total_amount'] == 202700

    def test_fee_only(self):
        result = compute_fee_breakdown(75000)

        assert result == {
            'professional_fee': 75000,
            'platform_fee': 7500,
            'gst': 14850,
            'reimbursements': 0,
            'regulatory_payouts': 0,
            'ope': 0,
            'total_amount': 97350,
        }

    def test_custom_rates(self):
        result = compute_fee_breakdown(10000, platform_rate=0.05, gst_rate=0.0)
        assert result['platform_fee'] == 500
        assert result['gst'] == 0
        assert result['total_amount'] == 10500

    def test_negative_component_rejected(self):
        with pytest.raises(ValidationError) as exc:
            compute_fee_breakdown(1000, ope=-1)
        assert 'ope must not be negative' in exc.value.details

    def test_non_numeric_fee_rejected(self):
        with pytest.raises(ValidationError):
            compute_fee_breakdown('1000')

    def test_rounding_is_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(1.49) == 1


class TestPaymentTerms:

    def test_even_split(self):
        terms = split_payment_terms(202700, [
            {'stage_label': 'Advance', 'amount_percentage': 50},
            {'stage_label': 'Completion', 'amount_percentage': 50},
        ])
        assert [t['amount'] for t in terms] == [101350, 101350]

    def test_last_term_absorbs_rounding(self):
        terms = split_payment_terms(100, [
            {'stage_label': 'A', 'amount_percentage': 33.33},
            {'stage_label': 'B', 'amount_percentage': 33.33},
            {'stage_label': 'C', 'amount_percentage': 33.34},
        ])
        assert sum(t['amount'] for t in terms) == 100
        assert terms[-1]['amount'] == 34

    def test_percentages_must_total_100(self):
        with pytest.raises(ValidationError, match='add up to 100'):
            split_payment_terms(1000, [{'stage_label': 'A', 'amount_percentage': 60}])

    def test_empty_terms_rejected(self):
        with pytest.raises(ValidationError):
            split_payment_terms(1000, [])

    def test_missing_label_reported(self):
        with pytest.raises(ValidationError) as exc:
            split_payment_terms(1000, [{'amount_percentage': 100}])
        assert 'terms[0].stage_label is required' in exc.value.details


class TestMoneyFormatting:

    def test_indian_grouping(self):
        assert format_inr(5000000) == '₹50,00,000'
        assert format_inr(1234567) == '₹12,34,567'
        assert format_inr(999) == '₹999'
        assert format_inr(-1500) == '-₹1,500'

    def test_simple_interest(self):
        assert simple_interest(100000, 0.12, '2024-01-01', '2024-12-31') == 12000
        assert simple_interest(100000, 0.12, '2024-06-01', '2024-01-01') == 0

    def test_percentage(self):
        assert percentage(2, 3) == 67
        assert percentage(5, 0) == 0
        assert percentage(10, 5) == 100


class TestListingHelpers:

    def setup_method(self):
        self.items = [{'id': i, 'name': f'item {i}', 'when': f'2024-01-{i:02d}'} for i in range(1, 24)]

    def test_paginate_metadata(self):
        result = paginate(self.items, page=3, limit=10)
        assert result['total'] == 23
        assert result['total_pages'] == 3
        assert [item['id'] for item in result['data']] == [21, 22, 23]

    def test_paginate_empty(self):
        result = paginate([], page=1, limit=10)
        assert result['data'] == []
        assert result['total_pages'] == 0

    def test_paginate_rejects_bad_page(self):
        with pytest.raises(ValidationError):
            paginate(self.items, page=0)

    def test_parse_pagination_caps_limit(self):
        page, limit = parse_pagination({'page': '2', 'limit': '500'}, {'MAX_PAGE_SIZE': 100})
        assert (page, limit) == (2, 100)

    def test_parse_pagination_rejects_text(self):
        with pytest.raises(ValidationError):
            parse_pagination({'page': 'two'}, {})

    def test_search_is_case_insensitive(self):
        record = {'title': 'Company Valuation', 'tags': ['Merger']}
        assert matches_search(record, 'valuation', ('title',))
        assert matches_search(record, 'MERGER', ('tags',))
        assert not matches_search(record, 'gst', ('title', 'tags'))

    def test_sort_records_puts_missing_last(self):
        items = [{'v': 2}, {'v': None}, {'v': 1}]
        assert [i['v'] for i in sort_records(items, 'v')] == [1, 2, None]
        assert [i['v'] for i in sort_records(items, 'v', descending=True)] == [2, 1, None]

    def test_date_range(self):
        assert in_date_range('2024-01-15T10:00:00', '2024-01-01', '2024-01-31')
        assert not in_date_range('2024-02-01', None, '2024-01-31')
        assert in_date_range('2024-02-01')


class TestValidators:

    def test_identifiers(self):
        assert is_valid_cin('U72900MH2015PTC123456')
        assert not is_valid_cin('U72900MH2015PTC12345')
        assert is_valid_pan('ABCDE1234F')
        assert not is_valid_pan('ABCDE12345')
        assert is_valid_ifsc('HDFC0001234')
        assert is_valid_email('ip@firm.example')
        assert not is_valid_email('ip@firm')

    def test_indian_mobile(self):
        assert is_valid_indian_mobile('9876543210')
        assert not is_valid_indian_mobile('5876543210')

    def test_require_fields_reports_blank_strings(self):
        assert require_fields({'a': ' ', 'b': 0}, ('a', 'b', 'c')) == ['a is required', 'c is required']

    def test_parse_date(self):
        assert parse_date('2024-03-05T08:00:00', 'd') == date(2024, 3, 5)
        with pytest.raises(ValidationError, match='d must be an ISO date'):
            parse_date('05/03/2024', 'd')

    def test_ensure_choice(self):
        assert ensure_choice('lump_sum', PaymentStructure, 'structure') is PaymentStructure.LUMP_SUM
        with pytest.raises(ValidationError, match='structure must be one of'):
            ensure_choice('barter', PaymentStructure, 'structure')


class TestIdentifiers:

    def test_new_id_prefix(self):
        record_id = new_id('wo')
        assert record_id.startswith('wo-')
        assert len(record_id) == len('wo-') + 8

    def test_sequence_continues_after_observed_numbers(self):
        numbers = SequenceGenerator('WO')
        numbers.observe('WO2024003')
        numbers.observe('BID2024009')
        assert numbers.next(2024) == 'WO2024004'
        assert numbers.next(2025) == 'WO2025001'

    def test_sequence_with_separator(self):
        numbers = SequenceGenerator('PRE-', separator='-')
        numbers.observe('PRE-2025-002')
        assert numbers.next(2025) == 'PRE-2025-003'


class TestAuditTrail:

    def setup_method(self):
        self.audit = AuditTrail(max_entries=3, clock=fixed_clock)

    def test_entries_are_bounded(self):
        for i in range(5):
            self.audit.record('claims', 'event', f'message {i}')
        messages = [e['message'] for e in self.audit.get_entries()]
        assert messages == ['message 2', 'message 3', 'message 4']

    def test_filters(self):
        self.audit.record('claims', 'admitted', 'ok', reference='c1')
        self.audit.record('claims', 'rejected', 'no', reference='c2', level='WARNING')
        self.audit.record('litigation', 'filed', 'filed')

        assert len(self.audit.get_entries(module='claims')) == 2
        assert self.audit.get_entries(level_filter='WARNING')[0]['reference'] == 'c2'
        assert self.audit.get_entries(reference='c1')[0]['action'] == 'admitted'
        assert self.audit.get_entries(limit=1)[0]['module'] == 'litigation'

    def test_timestamp_from_clock(self):
        entry = self.audit.record('desk', 'startup', 'up')
        assert entry['timestamp'] == '2024-01-20T10:00:00'

    def test_negative_limit_rejected(self):
        with pytest.raises(ValidationError):
            self.audit.get_entries(limit=-1)


class TestErrors:

    def test_validation_error_from_list(self):
        error = ValidationError(['a is required', 'b is required'])
        assert error.status_code == 400
        assert error.to_dict() == {'error': 'Validation failed',
                                   'details': ['a is required', 'b is required']}

    def test_single_message_list(self):
        assert ValidationError(['a is required']).message == 'a is required'

    def test_not_found_and_conflict(self):
        assert NotFoundError('Claim', 'x').to_dict() == {'error': 'Claim not found: x'}
        assert NotFoundError('Claim', 'x').status_code == 404
        assert ConflictError('nope').status_code == 409


class TestConfig:

    def test_page_size_clamped(self):
        assert DeskConfig.page_size() == 10
        assert DeskConfig.page_size(500) == 100
        assert DeskConfig.page_size(0) == 10

    def test_fee_rates(self):
        assert DeskConfig.get_fee_rates() == {'platform_rate': 0.10, 'gst_rate': 0.18}

    def test_fee_rates_follow_app_config(self):
        rates = DeskConfig.get_fee_rates({'PLATFORM_FEE_RATE': 0.05})
        assert rates == {'platform_rate': 0.05, 'gst_rate': 0.18}

    def test_page_size_uses_configured_bounds(self):
        assert DeskConfig.page_size('500', {'MAX_PAGE_SIZE': 50}) == 50
        assert DeskConfig.page_size(None, {'DEFAULT_PAGE_SIZE': 25}) == 25
