"""
Demo work orders
"""


def _party(party_id, name, email, address, pan=None, gst=None):
    return {'id': party_id, 'name': name, 'email': email, 'address': address, 'pan': pan, 'gst': gst}


def _signed(seeker_at, provider_at, signature_type):
    return {
        'seeker_signed': True, 'seeker_signed_at': seeker_at, 'seeker_signature_type': signature_type,
        'provider_signed': True, 'provider_signed_at': provider_at,
        'provider_signature_type': signature_type,
    }


UNSIGNED = {'seeker_signed': False, 'provider_signed': False}


DEMO_WORK_ORDERS = [
    {
        'id': 'wo-001',
        'wo_number': 'WO2024001',
        'reference_number': 'REF-001',
        'type': 'service_seeker_initiated',
        'status': 'in_progress',
        'service_request_id': 'sr-001',
        'bid_id': 'bid-001',
        'service_seeker': _party('seeker-001', 'ABC Manufacturing Ltd', 'admin@abcmfg.com',
                                 '123 Industrial Area, Mumbai, Maharashtra 400001',
                                 'ABCDE1234F', '27ABCDE1234F1Z5'),
        'service_provider': _party('provider-001', 'CA Rajesh Kumar & Associates', 'rajesh@cakumar.com',
                                   '456 Business District, Mumbai, Maharashtra 400002',
                                   'FGHIJ5678K', '27FGHIJ5678K1Z5'),
        'title': 'Annual Financial Audit 2024',
        'scope_of_work': 'Complete annual financial audit including statutory compliance, tax audit, '
                         'and management letter preparation.',
        'deliverables': ['Audit Report', 'Management Letter', 'Tax Audit Report', 'Compliance Certificate'],
        'timeline': {'start_date': '2024-01-15', 'expected_completion_date': '2024-03-15'},
        'financials': {
            'professional_fee': 150000, 'platform_fee': 15000, 'gst': 29700,
            'reimbursements': 5000, 'regulatory_payouts': 2000, 'ope': 1000, 'total_amount': 202700,
            'payment_terms': [
                {'id': 'pt-001', 'stage_label': 'Advance Payment', 'amount_percentage': 50,
                 'amount': 101350, 'status': 'paid', 'due_date': '2024-01-15', 'paid_date': '2024-01-14'},
                {'id': 'pt-002', 'stage_label': 'Final Payment', 'amount_percentage': 50,
                 'amount': 101350, 'status': 'paid', 'due_date': '2024-03-15', 'paid_date': '2024-03-12'},
            ],
            'money_receipts': [],
            'fee_advices': [],
        },
        'documents': [
            {'id': 'doc-001', 'name': 'Audit Report Final.pdf', 'label': 'Final Audit Report',
             'url': '/documents/audit-report-final.pdf', 'uploaded_at': '2024-03-10',
             'uploaded_by': 'provider-001', 'size': 2048000, 'type': 'application/pdf', 'category': 'final'},
        ],
        'milestones': [
            {'id': 'ms-001', 'title': 'Initial Documentation Review',
             'description': 'Review and verify all financial documents', 'delivery_date': '2024-02-01',
             'status': 'completed', 'documents': [], 'comments': []},
            {'id': 'ms-002', 'title': 'Field Work Completion',
             'description': 'Complete on-site audit procedures', 'delivery_date': '2024-02-28',
             'status': 'completed', 'documents': [], 'comments': []},
            {'id': 'ms-003', 'title': 'Final Report Issue',
             'description': 'Issue signed audit report and management letter', 'delivery_date': '2024-03-15',
             'status': 'in_progress', 'documents': [], 'comments': []},
        ],
        'information_requests': [],
        'feedbacks': [
            {'id': 'fb-001', 'work_order_id': 'wo-001', 'provided_by': 'seeker-001',
             'provided_by_type': 'seeker', 'stage': 'during_execution', 'rating': 5,
             'review_summary': 'Very thorough review so far.', 'timestamp': '2024-02-20T10:00:00'},
        ],
        'disputes': [],
        'team_members': [],
        'activities': [
            {'id': 'act-001', 'work_order_id': 'wo-001', 'type': 'work_order_created',
             'description': 'Work Order created from accepted bid', 'performed_by': 'seeker-001',
             'performed_by_type': 'seeker', 'timestamp': '2024-01-10T09:00:00'},
            {'id': 'act-002', 'work_order_id': 'wo-001', 'type': 'status_changed',
             'description': 'Status changed to In Progress', 'performed_by': 'provider-001',
             'performed_by_type': 'provider', 'timestamp': '2024-01-15T09:00:00'},
        ],
        'signatures': _signed('2024-01-12T10:00:00', '2024-01-13T10:00:00', 'digital_signature'),
        'created_by': 'seeker-001',
        'created_by_type': 'seeker',
        'created_at': '2024-01-10T09:00:00',
        'updated_at': '2024-03-12T09:00:00',
    },
    {
        'id': 'wo-002',
        'wo_number': 'WO2024002',
        'reference_number': 'REF-002',
        'type': 'service_provider_initiated',
        'status': 'disputed',
        'service_seeker': _party('seeker-002', 'XYZ Retail Chain', 'finance@xyzretail.com',
                                 '789 Commercial Street, Delhi, Delhi 110001',
                                 'KLMNO9012P', '07KLMNO9012P1Z5'),
        'service_provider': _party('provider-002', 'Legal Associates LLP', 'contact@legalassoc.com',
                                   '321 Law Street, Delhi, Delhi 110002', 'PQRST3456U', '07PQRST3456U1Z5'),
        'title': 'Contract Review and Legal Advisory',
        'scope_of_work': 'Review of vendor contracts and legal compliance advisory for retail operations.',
        'deliverables': ['Contract Analysis Report', 'Legal Compliance Checklist', 'Risk Assessment'],
        'timeline': {'start_date': '2024-02-01', 'expected_completion_date': '2024-02-28'},
        'financials': {
            'professional_fee': 75000, 'platform_fee': 7500, 'gst': 14850,
            'reimbursements': 0, 'regulatory_payouts': 0, 'ope': 0, 'total_amount': 97350,
            'payment_terms': [
                {'id': 'pt-003', 'stage_label': 'Full Payment', 'amount_percentage': 100,
                 'amount': 97350, 'status': 'balance_due', 'due_date': '2024-02-28'},
            ],
            'money_receipts': [],
            'fee_advices': [],
        },
        'documents': [],
        'milestones': [],
        'information_requests': [],
        'feedbacks': [],
        'disputes': [
            {'id': 'disp-001', 'work_order_id': 'wo-002', 'raised_by': 'seeker-002',
             'raised_by_type': 'seeker', 'reason': 'unsatisfactory_deliverable',
             'description': 'The contract analysis provided was incomplete and did not cover all '
                            'vendor agreements as specified.',
             'supporting_documents': [], 'messages': [], 'status': 'active',
             'created_at': '2024-02-25T11:00:00'},
        ],
        'team_members': [],
        'activities': [],
        'signatures': _signed('2024-01-30T10:00:00', '2024-01-31T10:00:00', 'e_sign'),
        'created_by': 'provider-002',
        'created_by_type': 'provider',
        'created_at': '2024-01-25T09:00:00',
        'updated_at': '2024-02-25T11:00:00',
    },
    {
        'id': 'wo-003',
        'wo_number': 'WO2024003',
        'type': 'service_seeker_initiated',
        'status': 'payment_pending',
        'service_seeker': _party('seeker-003', 'Tech Innovations Pvt Ltd', 'admin@techinnovations.com',
                                 '456 Tech Park, Bangalore, Karnataka 560001'),
        'service_provider': _party('provider-003', 'IP Law Consultants', 'info@iplawconsult.com',
                                   '789 Legal Complex, Bangalore, Karnataka 560002'),
        'title': 'Intellectual Property Registration',
        'scope_of_work': 'Patent filing and trademark registration for new technology products.',
        'deliverables': ['Patent Application', 'Trademark Registration', 'IP Strategy Document'],
        'timeline': {'start_date': '2024-03-01', 'expected_completion_date': '2024-04-30'},
        'financials': {
            'professional_fee': 120000, 'platform_fee': 12000, 'gst': 23760,
            'reimbursements': 15000, 'regulatory_payouts': 25000, 'ope': 2000, 'total_amount': 197760,
            'payment_terms': [
                {'id': 'pt-004', 'stage_label': 'Advance Payment', 'amount_percentage': 60,
                 'amount': 118656, 'status': 'balance_due', 'due_date': '2024-03-01'},
                {'id': 'pt-005', 'stage_label': 'Final Payment', 'amount_percentage': 40,
                 'amount': 79104, 'status': 'balance_due', 'due_date': '2024-04-30'},
            ],
            'money_receipts': [],
            'fee_advices': [
                {'id': 'fa-001', 'request_number': 'FA2024001', 'work_order_id': 'wo-003',
                 'date': '2024-03-20', 'amount': 15000, 'description': 'Additional trademark class filing',
                 'status': 'pending', 'created_by': 'provider-003'},
            ],
        },
        'documents': [],
        'milestones': [],
        'information_requests': [],
        'feedbacks': [],
        'disputes': [],
        'team_members': [],
        'activities': [],
        'signatures': dict(UNSIGNED),
        'created_by': 'seeker-003',
        'created_by_type': 'seeker',
        'created_at': '2024-02-25T09:00:00',
        'updated_at': '2024-02-25T09:00:00',
    },
]
