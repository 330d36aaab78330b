"""
Demo litigation cases
"""

DEMO_CASES = [
    {
        'id': 'pf-001',
        'case_number': 'PRE-2025-001',
        'title': 'Application Draft - NCLT Petition against Delta Corp',
        'type': 'pre-filing',
        'status': 'draft',
        'court': 'NCLT Mumbai',
        'lawyer': 'Adv. Rajesh Sharma',
        'amount': 1200000,
        'plaintiff': 'Acme Corporation Ltd',
        'defendant': 'Delta Corp Ltd',
        'priority': 'high',
        'created_date': '2025-01-15',
        'filing_deadline': '2025-01-30',
        'participants': 3,
        'particulars': 'Corporate insolvency resolution process under Section 7 of IBC 2016',
        'relief_sought': 'Initiation of CIRP against the Corporate Debtor',
        'entity_name': 'Acme Corporation Ltd',
        'hearings': [],
        'documents': [],
    },
    {
        'id': 'pf-002',
        'case_number': 'PRE-2025-002',
        'title': 'Commercial Dispute - Contract Breach Preparation',
        'type': 'pre-filing',
        'status': 'draft',
        'court': 'High Court Delhi',
        'lawyer': 'Adv. Neha Gupta',
        'amount': 950000,
        'plaintiff': 'TechSolutions Pvt Ltd',
        'defendant': 'Omega Industries',
        'priority': 'medium',
        'created_date': '2025-01-10',
        'filing_deadline': '2025-02-01',
        'participants': 2,
        'particulars': 'Breach of supply agreement and damages',
        'relief_sought': 'Damages and specific performance of contract',
        'entity_name': 'TechSolutions Pvt Ltd',
        'hearings': [],
        'documents': [],
    },
    {
        'id': 'ac-001',
        'case_number': 'CP(IB)-123/MB/2025',
        'title': 'Acme Corporation Ltd vs Beta Industries Pvt Ltd',
        'type': 'active',
        'status': 'pending',
        'court': 'NCLT Mumbai',
        'lawyer': 'Adv. Rajesh Sharma',
        'amount': 2500000,
        'plaintiff': 'Acme Corporation Ltd',
        'defendant': 'Beta Industries Pvt Ltd',
        'priority': 'high',
        'created_date': '2024-12-05',
        'filed_date': '2024-12-05',
        'next_hearing': '2025-02-20',
        'participants': 4,
        'entity_name': 'Acme Corporation Ltd',
        'hearings': [
            {'id': 'hr-001', 'date': '2025-02-20', 'purpose': 'Admission hearing',
             'status': 'scheduled', 'outcome': None},
        ],
        'documents': [],
    },
    {
        'id': 'ac-002',
        'case_number': 'CP(IB)-456/MB/2025',
        'title': 'TechSolutions Pvt Ltd vs Global Suppliers Inc',
        'type': 'active',
        'status': 'critical',
        'court': 'NCLT Mumbai',
        'lawyer': 'Adv. Priya Mehta',
        'amount': 1800000,
        'plaintiff': 'TechSolutions Pvt Ltd',
        'defendant': 'Global Suppliers Inc',
        'priority': 'critical',
        'created_date': '2024-11-20',
        'filed_date': '2024-11-20',
        'next_hearing': '2025-02-15',
        'last_hearing': '2025-01-20',
        'participants': 3,
        'entity_name': 'TechSolutions Pvt Ltd',
        'hearings': [
            {'id': 'hr-002', 'date': '2025-01-20', 'purpose': 'Reply by respondent',
             'status': 'held', 'outcome': 'Adjourned for rejoinder'},
            {'id': 'hr-003', 'date': '2025-02-15', 'purpose': 'Final arguments',
             'status': 'scheduled', 'outcome': None},
        ],
        'documents': [],
    },
    {
        'id': 'ac-003',
        'case_number': 'CS-789/2024',
        'title': 'Global Ventures Inc vs ABC Manufacturing Ltd',
        'type': 'active',
        'status': 'awaiting-docs',
        'court': 'High Court Mumbai',
        'lawyer': 'Adv. Suresh Kumar',
        'amount': 3200000,
        'plaintiff': 'Global Ventures Inc',
        'defendant': 'ABC Manufacturing Ltd',
        'priority': 'medium',
        'created_date': '2024-10-15',
        'filed_date': '2024-10-15',
        'participants': 2,
        'entity_name': 'Global Ventures Inc',
        'hearings': [],
        'documents': [],
    },
    {
        'id': 'cl-001',
        'case_number': 'CP(IB)-098/MB/2024',
        'title': 'Acme Corporation Ltd vs Sigma Traders',
        'type': 'closed',
        'status': 'won',
        'court': 'NCLT Mumbai',
        'lawyer': 'Adv. Rajesh Sharma',
        'amount': 850000,
        'plaintiff': 'Acme Corporation Ltd',
        'defendant': 'Sigma Traders',
        'priority': 'medium',
        'created_date': '2024-03-10',
        'filed_date': '2024-03-10',
        'last_hearing': '2024-09-18',
        'closed_date': '2024-09-18',
        'participants': 2,
        'entity_name': 'Acme Corporation Ltd',
        'hearings': [],
        'documents': [],
    },
    {
        'id': 'cl-002',
        'case_number': 'CS-221/2024',
        'title': 'TechSolutions Pvt Ltd vs Orbit Logistics',
        'type': 'closed',
        'status': 'lost',
        'court': 'High Court Delhi',
        'lawyer': 'Adv. Neha Gupta',
        'amount': 420000,
        'plaintiff': 'TechSolutions Pvt Ltd',
        'defendant': 'Orbit Logistics',
        'priority': 'low',
        'created_date': '2024-02-01',
        'filed_date': '2024-02-01',
        'last_hearing': '2024-08-05',
        'closed_date': '2024-08-05',
        'participants': 2,
        'entity_name': 'TechSolutions Pvt Ltd',
        'hearings': [],
        'documents': [],
    },
]
