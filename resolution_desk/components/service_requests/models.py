"""
Service request and bid enumerations
"""
import enum


class ServiceRequestStatus(str, enum.Enum):
    DRAFT = 'draft'
    OPEN = 'open'
    BID_RECEIVED = 'bid_received'
    UNDER_NEGOTIATION = 'under_negotiation'
    BID_ACCEPTED = 'bid_accepted'
    PAYMENT_PENDING = 'payment_pending'
    WORK_ORDER_ISSUED = 'work_order_issued'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CLOSED = 'closed'
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'


class BidStatus(str, enum.Enum):
    DRAFT = 'draft'
    SUBMITTED = 'submitted'
    UNDER_REVIEW = 'under_review'
    UNDER_NEGOTIATION = 'under_negotiation'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    WITHDRAWN = 'withdrawn'
    EXPIRED = 'expired'


class ProfessionalType(str, enum.Enum):
    LAWYER = 'lawyer'
    CHARTERED_ACCOUNTANT = 'chartered_accountant'
    COMPANY_SECRETARY = 'company_secretary'
    COST_MANAGEMENT_ACCOUNTANT = 'cost_management_accountant'
    VALUER = 'valuer'
    INSOLVENCY_PROFESSIONAL = 'insolvency_professional'


class ServiceType(str, enum.Enum):
    VALUATION_COMPANIES_ACT = 'valuation_companies_act'
    VALUATION_INCOME_TAX_ACT = 'valuation_income_tax_act'
    VALUATION_LB_IBC = 'valuation_lb_ibc'
    VALUATION_PM_IBC = 'valuation_pm_ibc'
    VALUATION_SFA_IBC = 'valuation_sfa_ibc'
    PUBLICATION_COMPANIES_ACT = 'publication_companies_act'
    PUBLICATION_IBC = 'publication_ibc'
    PUBLICATION_SEBI = 'publication_sebi'
    PUBLICATION_OTHER_LAWS = 'publication_other_laws'
    GST_COMPLIANCE = 'gst_compliance'
    LEGAL_NOTICE = 'legal_notice'
    ANNUAL_COMPLIANCE = 'annual_compliance'
    OTHERS = 'others'


class PaymentStructure(str, enum.Enum):
    LUMP_SUM = 'lump_sum'
    MILESTONE_BASED = 'milestone_based'
    MONTHLY_RETAINER = 'monthly_retainer'
    USAGE_BASED = 'usage_based'


class NegotiationReason(str, enum.Enum):
    REVISED_TIMELINE = 'revised_timeline'
    REQUEST_INFO = 'request_info'
    REQUEST_DOCUMENTS = 'request_documents'
    ADJUST_FEE = 'adjust_fee'
    CHANGE_PAYMENT_STRUCTURE = 'change_payment_structure'


# Requests that still accept bids
BIDDABLE_STATUSES = (
    ServiceRequestStatus.OPEN,
    ServiceRequestStatus.BID_RECEIVED,
    ServiceRequestStatus.UNDER_NEGOTIATION,
)

# Bids that are still in play
ACTIVE_BID_STATUSES = (
    BidStatus.SUBMITTED,
    BidStatus.UNDER_REVIEW,
    BidStatus.UNDER_NEGOTIATION,
)

# Payload fields each negotiation reason must carry
NEGOTIATION_REQUIREMENTS = {
    NegotiationReason.REVISED_TIMELINE: ('new_completion_date', 'reason_for_change'),
    NegotiationReason.REQUEST_INFO: ('clarification_needed',),
    NegotiationReason.REQUEST_DOCUMENTS: ('document_type', 'purpose'),
    NegotiationReason.ADJUST_FEE: ('suggested_fee', 'justification'),
    NegotiationReason.CHANGE_PAYMENT_STRUCTURE: ('preferred_model', 'proposed_terms', 'reason'),
}

# Keyword rules behind the scope assistant
SUGGESTION_RULES = (
    (('valuation', 'valuer', 'merger', 'fair value'),
     [ProfessionalType.VALUER, ProfessionalType.CHARTERED_ACCOUNTANT],
     [ServiceType.VALUATION_COMPANIES_ACT],
     ['Financial Statements', 'Asset Register', 'Shareholding Pattern']),
    (('liquidation', 'insolvency', 'ibc', 'cirp', 'resolution plan'),
     [ProfessionalType.INSOLVENCY_PROFESSIONAL, ProfessionalType.VALUER],
     [ServiceType.VALUATION_LB_IBC, ServiceType.PUBLICATION_IBC],
     ['Information Memorandum', 'List of Creditors', 'Latest Audited Financials']),
    (('gst', 'tax return', 'input credit'),
     [ProfessionalType.CHARTERED_ACCOUNTANT],
     [ServiceType.GST_COMPLIANCE],
     ['GST Returns', 'Purchase and Sales Registers']),
    (('income tax',),
     [ProfessionalType.CHARTERED_ACCOUNTANT],
     [ServiceType.VALUATION_INCOME_TAX_ACT],
     ['Income Tax Returns', 'Tax Audit Report']),
    (('legal notice', 'notice', 'litigation', 'contract'),
     [ProfessionalType.LAWYER],
     [ServiceType.LEGAL_NOTICE],
     ['Contract Copies', 'Correspondence Records']),
    (('annual filing', 'annual compliance', 'roc', 'agm'),
     [ProfessionalType.COMPANY_SECRETARY],
     [ServiceType.ANNUAL_COMPLIANCE],
     ['Board Resolutions', 'Statutory Registers']),
    (('sebi', 'listed'),
     [ProfessionalType.COMPANY_SECRETARY, ProfessionalType.LAWYER],
     [ServiceType.PUBLICATION_SEBI],
     ['Listing Agreement', 'Disclosure Filings']),
    (('cost audit', 'cost record'),
     [ProfessionalType.COST_MANAGEMENT_ACCOUNTANT],
     [ServiceType.OTHERS],
     ['Cost Records']),
)
