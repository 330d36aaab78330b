"""
Demo entities and the bundled MCA registry extract
"""

DEMO_ENTITIES = [
    {
        'entity_type': 'Company',
        'cin_number': 'U12345MH2020PTC123456',
        'entity_name': 'ABC Enterprises Pvt Ltd',
        'registration_no': 'REG123456',
        'roc_name': 'Registrar of Companies - Mumbai',
        'category': 'Private',
        'subcategory': 'Limited by Shares',
        'last_agm_date': '2023-09-15',
        'balance_sheet_date': '2023-03-31',
        'company_status': 'Active',
        'index_of_charges': 'No charges',
        'status': 'active',
        'directors': [
            {'name': 'John Doe', 'designation': 'Director', 'din': '00123456',
             'dob': '1975-05-15', 'email': 'john.doe@example.com', 'contact': '+91 9876543210'},
            {'name': 'Jane Smith', 'designation': 'Director', 'din': '00789012',
             'dob': '1980-08-22', 'email': 'jane.smith@example.com', 'contact': '+91 9876543211'},
        ],
        'pan': 'ABCDE1234F',
        'gstn': {'available': True, 'number': '27ABCDE1234F1Z5'},
        'msme': {'available': True, 'number': 'UDYAM-MH-01-0123456'},
        'bank_accounts': [
            {'account_no': '1234567890123456', 'ifsc_code': 'SBIN0001234',
             'bank_name': 'State Bank of India', 'branch': 'Mumbai Main', 'is_main': True},
        ],
        'registered_office': {
            'address': '123 Business Park, Tower A, 5th Floor',
            'city': 'Mumbai', 'state': 'Maharashtra', 'pincode': '400001', 'country': 'India',
        },
        'business_locations': ['Mumbai', 'Pune', 'Bangalore'],
        'registered_email': 'info@abcenterprises.com',
        'phone_number': '+91 22 12345678',
        'key_personnel': [
            {'id': 1, 'name': 'John Doe', 'designation': 'CEO', 'identity_no': 'ABCDE1234F',
             'din': '00123456', 'email': 'john.doe@example.com', 'contact': '+91 9876543210'},
        ],
        'industry_details': [
            {'industry': 'Manufacturing', 'sub_industry': 'Auto components',
             'products': ['Gears', 'Shafts'], 'installed_capacity': 12000,
             'sales_quantity': 9500, 'sales_value': 185000000},
        ],
        'financial_records': [
            {'id': 'fr-001', 'document_type': 'Audited Balance Sheet', 'financial_year': '2022-23',
             'file_name': 'balance_sheet_2022_23.pdf', 'status': 'Verified', 'is_verified': True},
        ],
        'creditors': [
            {'id': 'cr-001', 'name': 'State Bank of India', 'class': 'Financial Creditor',
             'sub_class': 'Secured', 'amount': 25000000, 'status': 'Admitted'},
            {'id': 'cr-002', 'name': 'Steel Suppliers Ltd', 'class': 'Operational Creditor',
             'amount': 3500000, 'status': 'Pending'},
        ],
        'bank_documents': [],
        'created_at': '2024-01-10T10:00:00',
        'updated_at': '2024-01-10T10:00:00',
    },
    {
        'entity_type': 'LLP',
        'cin_number': 'AAB-1234',
        'entity_name': 'Kumar & Associates LLP',
        'registration_no': 'LLP-AAB-1234',
        'roc_name': 'Registrar of Companies - Delhi',
        'category': 'LLP',
        'subcategory': '',
        'company_status': 'Active',
        'status': 'under_cirp',
        'directors': [],
        'pan': 'KLMNO9012P',
        'gstn': {'available': False, 'number': ''},
        'bank_accounts': [],
        'registered_office': {
            'address': '321 Law Street', 'city': 'Delhi', 'state': 'Delhi',
            'pincode': '110002', 'country': 'India',
        },
        'business_locations': ['Delhi'],
        'registered_email': 'contact@kumarllp.in',
        'phone_number': '+91 11 23456789',
        'key_personnel': [],
        'industry_details': [],
        'financial_records': [],
        'creditors': [],
        'bank_documents': [],
        'created_at': '2024-02-01T09:30:00',
        'updated_at': '2024-02-01T09:30:00',
    },
]

# Master data extract used when no MCA endpoint is configured
MCA_REGISTRY = {
    'U12345MH2020PTC123456': {
        'entity_name': 'ABC Enterprises Pvt Ltd',
        'registration_no': 'REG123456',
        'roc_name': 'Registrar of Companies - Mumbai',
        'category': 'Private',
        'subcategory': 'Limited by Shares',
        'company_status': 'Active',
        'directors': [
            {'name': 'John Doe', 'designation': 'Director', 'din': '00123456',
             'dob': '1975-05-15', 'email': '', 'contact': ''},
            {'name': 'Jane Smith', 'designation': 'Director', 'din': '00789012',
             'dob': '1980-08-22', 'email': '', 'contact': ''},
        ],
    },
    'L17110MH1973PLC019786': {
        'entity_name': 'Western Textiles Ltd',
        'registration_no': '019786',
        'roc_name': 'Registrar of Companies - Mumbai',
        'category': 'Public',
        'subcategory': 'Limited by Shares',
        'company_status': 'Under CIRP',
        'directors': [
            {'name': 'Anil Mehta', 'designation': 'Managing Director', 'din': '00011223',
             'dob': '1962-02-11', 'email': '', 'contact': ''},
        ],
    },
}
