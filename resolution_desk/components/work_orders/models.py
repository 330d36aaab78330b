"""
Work order enumerations and the status transition table
"""
import enum


class WorkOrderStatus(str, enum.Enum):
    PROFORMA = 'proforma'
    PAYMENT_PENDING = 'payment_pending'
    INFORMATION_SOUGHT = 'information_sought'
    INFORMATION_PENDING = 'information_pending'
    PROFORMA_ACCEPTANCE_PENDING = 'proforma_acceptance_pending'
    SIGNATURE_PENDING = 'signature_pending'
    IN_PROGRESS = 'in_progress'
    ON_HOLD = 'on_hold'
    DISPUTED = 'disputed'
    COMPLETED = 'completed'
    PAYMENT_PENDING_COMPLETION = 'payment_pending_completion'
    REJECTED = 'rejected'
    CANCELLED = 'cancelled'


class WorkOrderType(str, enum.Enum):
    SERVICE_SEEKER_INITIATED = 'service_seeker_initiated'
    SERVICE_PROVIDER_INITIATED = 'service_provider_initiated'


class SignatureType(str, enum.Enum):
    DIGITAL_SIGNATURE = 'digital_signature'
    E_SIGN = 'e_sign'
    PRINT_SIGN_UPLOAD = 'print_sign_upload'


class DisputeReason(str, enum.Enum):
    MISSED_DEADLINE = 'missed_deadline'
    UNSATISFACTORY_DELIVERABLE = 'unsatisfactory_deliverable'
    UNRESPONSIVE_PROVIDER = 'unresponsive_provider'
    NON_RESPONSIVE_SEEKER = 'non_responsive_seeker'
    UNJUSTIFIED_DELAY = 'unjustified_delay'
    PAYMENT_NOT_RELEASED = 'payment_not_released'
    SCOPE_CREEP = 'scope_creep'
    UNPROFESSIONAL_CONDUCT = 'unprofessional_conduct'
    INVALID_FEE_ADVICE = 'invalid_fee_advice'
    WORK_REJECTION = 'work_rejection'
    EXCESSIVE_REVISIONS = 'excessive_revisions'
    OTHER = 'other'


class FeeAdviceStatus(str, enum.Enum):
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    PAID = 'paid'
    BALANCE_DUE = 'balance_due'


class PaymentTermStatus(str, enum.Enum):
    PAID = 'paid'
    BALANCE_DUE = 'balance_due'
    OVERDUE = 'overdue'


class ActivityType(str, enum.Enum):
    DOCUMENT_UPLOADED = 'document_uploaded'
    DOCUMENT_DOWNLOADED = 'document_downloaded'
    DOCUMENT_DELETED = 'document_deleted'
    COMMENT_ADDED = 'comment_added'
    STATUS_CHANGED = 'status_changed'
    PAYMENT_MADE = 'payment_made'
    FEE_ADVICE_RAISED = 'fee_advice_raised'
    DISPUTE_RAISED = 'dispute_raised'
    FEEDBACK_PROVIDED = 'feedback_provided'
    TEAM_MEMBER_ALLOCATED = 'team_member_allocated'
    SIGNATURE_COMPLETED = 'signature_completed'
    WORK_ORDER_CREATED = 'work_order_created'
    WORK_ORDER_ACCEPTED = 'work_order_accepted'
    WORK_ORDER_REJECTED = 'work_order_rejected'


class WorkOrderTabAccess(str, enum.Enum):
    WO_OVERVIEW = 'wo_overview'
    TRACK_TASK = 'track_task'
    RAISE_DISPUTE = 'raise_dispute'
    PROVIDE_FEEDBACK = 'provide_feedback'
    PAYMENT_AND_FEE_ADVICES = 'payment_and_fee_advices'
    GENERATE_FEE_ADVICES = 'generate_fee_advices'
    ACTIVITY_LOG = 'activity_log'
    WO_ALLOCATION = 'wo_allocation'
    FEEDBACK = 'feedback'


S = WorkOrderStatus

TRANSITIONS = {
    S.PROFORMA: {S.PAYMENT_PENDING, S.PROFORMA_ACCEPTANCE_PENDING, S.SIGNATURE_PENDING,
                 S.REJECTED, S.CANCELLED},
    S.PROFORMA_ACCEPTANCE_PENDING: {S.PAYMENT_PENDING, S.REJECTED, S.CANCELLED},
    S.PAYMENT_PENDING: {S.SIGNATURE_PENDING, S.CANCELLED},
    S.SIGNATURE_PENDING: {S.IN_PROGRESS, S.CANCELLED},
    S.IN_PROGRESS: {S.INFORMATION_SOUGHT, S.ON_HOLD, S.DISPUTED, S.PAYMENT_PENDING_COMPLETION,
                    S.COMPLETED},
    S.INFORMATION_SOUGHT: {S.INFORMATION_PENDING, S.IN_PROGRESS},
    S.INFORMATION_PENDING: {S.IN_PROGRESS},
    S.ON_HOLD: {S.IN_PROGRESS, S.CANCELLED, S.DISPUTED},
    S.DISPUTED: {S.IN_PROGRESS, S.ON_HOLD, S.CANCELLED, S.COMPLETED},
    S.PAYMENT_PENDING_COMPLETION: {S.COMPLETED, S.DISPUTED},
    S.COMPLETED: {S.DISPUTED},
    S.REJECTED: set(),
    S.CANCELLED: set(),
}

OPEN_STATUSES = (S.PROFORMA, S.PAYMENT_PENDING, S.SIGNATURE_PENDING)

MILESTONE_STATUSES = ('pending', 'in_progress', 'completed', 'overdue')

FEEDBACK_STAGES = ('during_execution', 'on_completion')

PARTY_TYPES = ('seeker', 'provider')
