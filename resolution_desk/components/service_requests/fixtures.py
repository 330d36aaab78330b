"""
Demo service requests and bids
"""

DEMO_SERVICE_REQUESTS = [
    {
        'id': 'sr-001',
        'srn_number': 'SRN2024001',
        'title': 'Company Valuation for Merger',
        'description': 'Need comprehensive valuation of manufacturing company for merger proceedings',
        'service_category': ['valuer', 'chartered_accountant'],
        'service_types': ['valuation_companies_act'],
        'scope_of_work': 'Comprehensive valuation including asset valuation, financial analysis, '
                         'and market comparison for merger proceedings.',
        'budget_range': {'min': 50000, 'max': 100000},
        'budget_not_clear': False,
        'documents': [
            {'id': 'doc-001', 'name': 'Financial_Statements_2023.pdf',
             'label': 'Annual Financial Statements', 'url': '/documents/financial-statements-2023.pdf',
             'uploaded_at': '2024-01-15T10:00:00', 'size': 2048000, 'type': 'application/pdf'},
        ],
        'questionnaire': [
            {'id': 'q-001', 'question': 'What is the primary purpose of this valuation?',
             'answer': 'Merger and acquisition proceedings', 'is_required': True, 'is_skipped': False},
        ],
        'work_required_by': '2024-02-28',
        'preferred_locations': ['Mumbai', 'Pune'],
        'invited_professionals': ['provider-001'],
        'repeat_past_professionals': [],
        'status': 'bid_received',
        'created_by': 'seeker-001',
        'created_at': '2024-01-10T09:00:00',
        'updated_at': '2024-01-13T12:00:00',
        'deadline': '2024-02-10',
        'is_ai_assisted': False,
    },
    {
        'id': 'sr-002',
        'srn_number': 'SRN2024002',
        'title': 'GST Compliance Review',
        'description': 'Quarterly GST compliance review and filing support',
        'service_category': ['chartered_accountant'],
        'service_types': ['gst_compliance'],
        'scope_of_work': 'Review of GST returns for the last four quarters and reconciliation of input credit.',
        'budget_range': {'min': 20000, 'max': 40000},
        'budget_not_clear': False,
        'documents': [],
        'questionnaire': [],
        'preferred_locations': ['Delhi'],
        'invited_professionals': [],
        'repeat_past_professionals': [],
        'status': 'draft',
        'created_by': 'seeker-001',
        'created_at': '2024-01-18T11:30:00',
        'updated_at': '2024-01-18T11:30:00',
        'deadline': '2024-02-20',
        'is_ai_assisted': True,
    },
]

DEMO_BIDS = [
    {
        'id': 'bid-001',
        'bid_number': 'BID2024001',
        'service_request_id': 'sr-001',
        'provider_id': 'provider-001',
        'provider_name': 'CA Rajesh Kumar & Associates',
        'provider_profile': {'rating': 4.8, 'completed_projects': 150,
                             'expertise': ['Valuation', 'Audit'], 'location': 'Mumbai'},
        'financials': {
            'professional_fee': 75000, 'platform_fee': 7500, 'gst': 14850,
            'reimbursements': 0, 'regulatory_payouts': 0, 'ope': 0,
            'total_amount': 97350, 'payment_structure': 'lump_sum', 'milestones': [],
        },
        'delivery_date': '2024-02-15',
        'additional_inputs': 'Team of two registered valuers; site visit included.',
        'documents': [],
        'status': 'submitted',
        'is_invited': True,
        'submitted_at': '2024-01-13T12:00:00',
        'updated_at': '2024-01-13T12:00:00',
        'last_edit_date': '2024-01-13T12:00:00',
    },
]
