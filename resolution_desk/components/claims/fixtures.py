"""
Demo creditor claims for ABC Corporation Ltd
"""

CHECKLIST_FLAGS = (
    'related_party',
    'form_filled',
    'form_signed',
    'form_verified',
    'form_declared',
    'authorized_signatory',
    'letter_of_authority',
    'limitation_test',
    'msme_registered',
    'receipts_on_time',
    'interest_calculation',
)


def blank_checklist():
    return {flag: False for flag in CHECKLIST_FLAGS}


def _verification(platform_amount, verifier_amount=0, status='pending', **extra):
    block = {
        'security_type': None,
        'relationship_status': None,
        'platform_amount': platform_amount,
        'platform_remarks': '',
        'verifier_amount': verifier_amount,
        'verifier_remarks': '',
        'verification_status': status,
        'queries': [],
        'checklist': blank_checklist(),
    }
    block.update(extra)
    return block


_SBI_CHECKLIST = dict(blank_checklist(), form_filled=True, form_signed=True, form_verified=True,
                      form_declared=True, authorized_signatory=True, letter_of_authority=True,
                      limitation_test=True, receipts_on_time=True, interest_calculation=True)

DEMO_CLAIMS = [
    {
        'id': 'INV001',
        'claimant_name': 'State Bank of India',
        'claimant_category': 'Financial Creditor - Secured',
        'claimed_amount': 5000000,
        'principal_amount': 4500000,
        'interest_amount': 500000,
        'status': 'verification_pending',
        'source': 'claimant_submitted',
        'submission_date': '2024-01-20',
        'assigned_to': 'John Doe',
        'entity_name': 'ABC Corporation Ltd',
        'verification': _verification(
            4800000, status='ongoing', security_type='Secured', relationship_status='Not Related',
            platform_remarks='Documents verified. Amount calculation matches ledger entries.',
            queries=[{'id': 'q1',
                      'question': 'Please provide updated bank statements for the last 6 months',
                      'response': 'Updated statements have been uploaded to the document section',
                      'timestamp': '2024-01-21T10:30:00'}],
            checklist=_SBI_CHECKLIST,
        ),
    },
    {
        'id': 'INV002',
        'claimant_name': 'HDFC Bank Ltd',
        'claimant_category': 'Financial Creditor - Unsecured',
        'claimed_amount': 2500000,
        'principal_amount': 2300000,
        'interest_amount': 200000,
        'status': 'accepted',
        'source': 'claimant_submitted',
        'submission_date': '2024-01-18',
        'assigned_to': 'Jane Smith',
        'verified_by': 'John Doe',
        'admitted_by': 'Jane Smith',
        'admitted_amount': 2400000,
        'entity_name': 'ABC Corporation Ltd',
        'verification': _verification(2450000, 2400000, status='completed',
                                       security_type='Unsecured', relationship_status='Not Related'),
    },
    {
        'id': 'INV003',
        'claimant_name': 'ABC Suppliers Ltd',
        'claimant_category': 'Operational Creditor',
        'claimed_amount': 750000,
        'principal_amount': 750000,
        'interest_amount': 0,
        'status': 'allocation_pending',
        'source': 'team_uploaded',
        'submission_date': '2024-01-19',
        'uploaded_by': 'Admin User',
        'entity_name': 'ABC Corporation Ltd',
        'verification': _verification(750000),
    },
    {
        'id': 'INV004',
        'claimant_name': 'Employee Union',
        'claimant_category': 'Workmen/Staff/Employees',
        'claimed_amount': 1200000,
        'principal_amount': 1200000,
        'interest_amount': 0,
        'status': 'admission_pending',
        'source': 'claimant_submitted',
        'submission_date': '2024-01-17',
        'assigned_to': 'Mike Johnson',
        'verified_by': 'John Doe',
        'entity_name': 'ABC Corporation Ltd',
        'verification': _verification(1200000, 1150000, status='completed',
                                      security_type='Unsecured', relationship_status='Not Related'),
    },
]
