"""
Demo prospective resolution applicants and their plans

Plan figures are in crore rupees.
"""

DEMO_PRAS = [
    {'id': 'pra-001', 'name': 'TechSol', 'group_type': 'standalone', 'entity_type': 'company',
     'submit_date': '2025-01-15', 'status': 'review', 'section_29a_compliant': True,
     'documents_complete': True, 'net_worth_certificate': False, 'kyc_complete': True,
     'contact_info': {'email': 'bids@techsol.example', 'phone': '9820012345'},
     'financial_info': {'net_worth': 420.0, 'turnover': 1150.0}},
    {'id': 'pra-002', 'name': 'InfraCorp', 'group_type': 'consortium', 'entity_type': 'partnership',
     'submit_date': '2025-01-16', 'status': 'approved', 'section_29a_compliant': True,
     'documents_complete': True, 'net_worth_certificate': True, 'kyc_complete': True,
     'contact_info': {'email': 'resolution@infracorp.example'},
     'financial_info': {'net_worth': 980.0, 'turnover': 2600.0}},
    {'id': 'pra-003', 'name': 'MetalWks', 'group_type': 'standalone', 'entity_type': 'company',
     'submit_date': '2025-01-17', 'status': 'query', 'section_29a_compliant': False,
     'documents_complete': False, 'net_worth_certificate': True, 'kyc_complete': False,
     'contact_info': {}, 'financial_info': {}},
    {'id': 'pra-004', 'name': 'PowerGen', 'group_type': 'group', 'entity_type': 'company',
     'submit_date': '2025-01-18', 'status': 'review', 'section_29a_compliant': True,
     'documents_complete': True, 'net_worth_certificate': True, 'kyc_complete': True,
     'contact_info': {}, 'financial_info': {'net_worth': 610.0}},
    {'id': 'pra-005', 'name': 'CleanTech', 'group_type': 'standalone', 'entity_type': 'company',
     'submit_date': '2025-01-19', 'status': 'approved', 'section_29a_compliant': True,
     'documents_complete': True, 'net_worth_certificate': True, 'kyc_complete': True,
     'contact_info': {}, 'financial_info': {}},
]

DEMO_PLANS = [
    {'id': 'plan-001', 'pra_name': 'TechSol Industries', 'version': 'V1.2', 'submit_date': '2025-01-20',
     'npv_value': 127.4, 'recovery_percentage': 68, 'status': 'under_review',
     'secured_creditors': 85.2, 'unsecured_creditors': 45.3, 'operational_creditors': 8.9,
     'workmen_dues': 2.3, 'total_recovery': 141.7},
    {'id': 'plan-002', 'pra_name': 'InfraCorp Solutions', 'version': 'V2.0', 'submit_date': '2025-01-21',
     'npv_value': 145.8, 'recovery_percentage': 75, 'status': 'approved',
     'secured_creditors': 92.1, 'unsecured_creditors': 58.7, 'operational_creditors': 11.2,
     'workmen_dues': 2.3, 'total_recovery': 164.3},
]

LIQUIDATION_VALUE = {
    'secured_creditors': 78.5,
    'unsecured_creditors': 12.3,
    'operational_creditors': 5.1,
    'workmen_dues': 2.3,
    'total_recovery': 98.2,
    'npv_value': 89.1,
}
