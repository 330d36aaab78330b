"""
PRA Evaluation and Resolution Plan Business Logic
"""
import copy
from datetime import timedelta

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import new_id
from resolution_desk.core.pagination import matches_search
from resolution_desk.core.validators import ensure_choice, non_negative_number, parse_date, require_fields
from .fixtures import DEMO_PLANS, DEMO_PRAS, LIQUIDATION_VALUE
from .models import GroupType, PlanStatus, PraStatus


# Check flag -> weight in the compliance score
COMPLIANCE_WEIGHTS = (
    ('section_29a_compliant', 40),
    ('documents_complete', 25),
    ('net_worth_certificate', 20),
    ('kyc_complete', 15),
)

MISSING_ITEM_LABELS = {
    'section_29a_compliant': 'Section 29A declaration',
    'documents_complete': 'Supporting documents',
    'net_worth_certificate': 'Net worth certificate',
    'kyc_complete': 'KYC verification',
}

RECOVERY_CATEGORIES = ('secured_creditors', 'unsecured_creditors', 'operational_creditors', 'workmen_dues')
COMPARISON_FIELDS = ('npv_value', 'recovery_percentage') + RECOVERY_CATEGORIES + ('total_recovery',)

DEFAULT_DOCUMENTS = ('Registration Certificate', 'Financial Statements', 'Net Worth Certificate',
                     'Experience Certificate', 'Team Details')

PRA_EDITABLE_FIELDS = ('name', 'group_type', 'entity_type', 'contact_info', 'financial_info',
                       'section_29a_compliant', 'documents_complete', 'net_worth_certificate',
                       'kyc_complete')


def compute_compliance_score(pra):
    """Weighted score out of 100 for the four eligibility checks"""
    return sum(weight for flag, weight in COMPLIANCE_WEIGHTS if pra.get(flag))


def _missing_items(pra):
    return [MISSING_ITEM_LABELS[flag] for flag, _ in COMPLIANCE_WEIGHTS if not pra.get(flag)]


@register_component('resolution')
class ResolutionService(DeskService):
    """Service for evaluating PRAs and ranking their resolution plans"""

    module = 'resolution'

    def __init__(self, config=None, audit=None, clock=None):
        super().__init__(config, audit, clock)
        self.pras = {}
        self.plans = {}
        self.liquidation_value = None

    def seed(self):
        for pra in copy.deepcopy(DEMO_PRAS):
            pra['documents'] = [{'name': name, 'status': 'received' if pra['documents_complete'] else 'pending'}
                                for name in DEFAULT_DOCUMENTS]
            pra['evaluation_history'] = [{'date': pra['submit_date'], 'action': 'Application Submitted',
                                          'evaluator': 'System', 'remarks': ''}]
            pra['compliance_score'] = compute_compliance_score(pra)
            self.pras[pra['id']] = pra
        for plan in copy.deepcopy(DEMO_PLANS):
            self.plans[plan['id']] = plan
        self._rerank()
        self.liquidation_value = dict(LIQUIDATION_VALUE)

    # ── PRA applications ────────────────────────────────────────

    def _get_pra(self, pra_id):
        pra = self.pras.get(pra_id)
        if pra is None:
            raise NotFoundError('PRA application', pra_id)
        return pra

    def get_pra(self, pra_id):
        return copy.deepcopy(self._get_pra(pra_id))

    def list_pra_applications(self, search=None, status=None, group_type=None):
        pras = list(self.pras.values())
        if status and status != 'all':
            ensure_choice(status, PraStatus, 'status')
            pras = [p for p in pras if p['status'] == status]
        if group_type and group_type != 'all':
            ensure_choice(group_type, GroupType, 'group_type')
            pras = [p for p in pras if p['group_type'] == group_type]
        if search and search.strip():
            pras = [p for p in pras if matches_search(p, search.strip(), ('name', 'entity_type'))]
        pras.sort(key=lambda p: p['submit_date'], reverse=True)
        return copy.deepcopy(pras)

    def _log_evaluation(self, pra, action, evaluator, remarks=''):
        pra['evaluation_history'].append({
            'date': self.today().isoformat(),
            'action': action,
            'evaluator': evaluator or 'System',
            'remarks': remarks or '',
        })

    def update_pra(self, pra_id, changes, actor=None):
        pra = self._get_pra(pra_id)
        updates = {k: v for k, v in changes.items() if k in PRA_EDITABLE_FIELDS}
        if 'group_type' in updates:
            updates['group_type'] = ensure_choice(updates['group_type'], GroupType, 'group_type').value
        with self._lock:
            self._ensure_open(pra)
            pra.update(copy.deepcopy(updates))
            pra['compliance_score'] = compute_compliance_score(pra)
            self._log_evaluation(pra, 'Application Updated', actor, ', '.join(sorted(updates)))
        self._record('pra_updated', f"PRA {pra['name']} updated", reference=pra_id, actor=actor)
        return copy.deepcopy(pra)

    def _ensure_open(self, pra):
        if pra['status'] in ('approved', 'rejected'):
            raise ConflictError(f"PRA {pra['name']} is already {pra['status']}")

    def approve_pra(self, pra_id, evaluator=None, remarks=''):
        pra = self._get_pra(pra_id)
        with self._lock:
            self._ensure_open(pra)
            if not pra['section_29a_compliant']:
                raise ConflictError(f"PRA {pra['name']} is not Section 29A compliant")
            pra['status'] = 'approved'
            self._log_evaluation(pra, 'Application Approved', evaluator, remarks)
        self._record('pra_approved', f"PRA {pra['name']} approved", reference=pra_id, actor=evaluator)
        return copy.deepcopy(pra)

    def reject_pra(self, pra_id, reason, evaluator=None):
        if not reason:
            raise ValidationError('reason is required')
        pra = self._get_pra(pra_id)
        with self._lock:
            self._ensure_open(pra)
            pra['status'] = 'rejected'
            pra['rejection_reason'] = reason
            self._log_evaluation(pra, 'Application Rejected', evaluator, reason)
        self._record('pra_rejected', f"PRA {pra['name']} rejected: {reason}", reference=pra_id,
                     actor=evaluator, level='WARNING')
        return copy.deepcopy(pra)

    def raise_pra_query(self, pra_id, query, evaluator=None):
        if not query:
            raise ValidationError('query is required')
        pra = self._get_pra(pra_id)
        with self._lock:
            self._ensure_open(pra)
            pra['status'] = 'query'
            self._log_evaluation(pra, 'Query Raised', evaluator, query)
        self._record('pra_query', f"Query raised on PRA {pra['name']}", reference=pra_id, actor=evaluator)
        return copy.deepcopy(pra)

    def auto_evaluate(self, evaluator='System'):
        """Recommend or flag every application still in review"""
        threshold = self.setting('PRA_APPROVAL_THRESHOLD', 80)
        results = []
        with self._lock:
            for pra in self.pras.values():
                if pra['status'] != 'review':
                    continue
                score = compute_compliance_score(pra)
                pra['compliance_score'] = score
                reasons = []
                if not pra['section_29a_compliant']:
                    reasons.append('Section 29A compliance not established')
                if not pra['documents_complete']:
                    reasons.append('Documents incomplete')
                if not pra['kyc_complete']:
                    reasons.append('KYC pending')
                if score < threshold:
                    reasons.append(f'Compliance score {score} below threshold {threshold}')

                recommendation = 'flag' if reasons else 'approve'
                pra['recommendation'] = recommendation
                action = 'Recommended for Approval' if recommendation == 'approve' else 'Flagged for Review'
                self._log_evaluation(pra, action, evaluator, '; '.join(reasons))
                results.append({'id': pra['id'], 'name': pra['name'], 'score': score,
                                'recommendation': recommendation, 'reasons': reasons})
        self._record('auto_evaluation', f'Auto evaluation covered {len(results)} application(s)',
                     actor=evaluator)
        return results

    def get_compliance_stats(self):
        threshold = self.setting('PRA_APPROVAL_THRESHOLD', 80)
        window_start = self.today() - timedelta(days=self.setting('NEW_PRA_WINDOW_DAYS', 7))
        pras = list(self.pras.values())
        return {
            'total': len(pras),
            'new': sum(1 for p in pras if parse_date(p['submit_date'], 'submit_date') >= window_start),
            'section_29a_compliant': sum(1 for p in pras if p['section_29a_compliant']),
            'documents_complete': sum(1 for p in pras if p['documents_complete']),
            'ready_for_approval': sum(
                1 for p in pras
                if p['status'] == 'review' and p['section_29a_compliant'] and p['documents_complete']
                and p['kyc_complete'] and compute_compliance_score(p) >= threshold),
        }

    def get_alerts(self):
        alerts = []
        for pra in sorted(self.pras.values(), key=lambda p: p['submit_date']):
            missing = _missing_items(pra)
            if missing:
                alerts.append({'pra_id': pra['id'], 'name': pra['name'], 'type': 'warning',
                               'missing': missing,
                               'message': f"{pra['name']}: missing {', '.join(missing)}"})
            else:
                alerts.append({'pra_id': pra['id'], 'name': pra['name'], 'type': 'success', 'missing': [],
                               'message': f"{pra['name']}: all documents verified and compliant"})
        return alerts

    # ── Resolution plans ────────────────────────────────────────

    def _rerank(self):
        ranked = sorted(self.plans.values(), key=lambda p: (-p['npv_value'], p['submit_date']))
        for position, plan in enumerate(ranked, start=1):
            plan['rank'] = position

    def _get_plan(self, plan_id):
        plan = self.plans.get(plan_id)
        if plan is None:
            raise NotFoundError('Resolution plan', plan_id)
        return plan

    def get_plan(self, plan_id):
        return dict(self._get_plan(plan_id))

    def list_plans(self, status=None):
        plans = list(self.plans.values())
        if status and status != 'all':
            ensure_choice(status, PlanStatus, 'status')
            plans = [p for p in plans if p['status'] == status]
        return [dict(p) for p in sorted(plans, key=lambda p: p['rank'])]

    def add_plan(self, payload, actor=None):
        errors = require_fields(payload, ('pra_name', 'version', 'npv_value'))
        figures = {}
        for field in COMPARISON_FIELDS:
            if payload.get(field) is None:
                continue
            try:
                figures[field] = non_negative_number(payload[field], field)
            except ValidationError as e:
                errors.append(e.message)
        if figures.get('recovery_percentage', 0) > 100:
            errors.append('recovery_percentage must not exceed 100')
        if errors:
            raise ValidationError(errors)

        plan = {
            'id': new_id('plan'),
            'pra_name': payload['pra_name'],
            'version': payload['version'],
            'submit_date': self.today().isoformat(),
            'status': 'submitted',
            'recovery_percentage': 0,
        }
        plan.update({category: 0 for category in RECOVERY_CATEGORIES})
        plan.update(figures)
        if 'total_recovery' not in figures:
            plan['total_recovery'] = round(sum(plan[c] for c in RECOVERY_CATEGORIES), 2)
        with self._lock:
            self.plans[plan['id']] = plan
            self._rerank()
        self._record('plan_added', f"Plan {plan['version']} from {plan['pra_name']} ranked {plan['rank']}",
                     reference=plan['id'], actor=actor)
        return dict(plan)

    def update_plan_status(self, plan_id, status, actor=None):
        status = ensure_choice(status, PlanStatus, 'status').value
        plan = self._get_plan(plan_id)
        with self._lock:
            if status == 'approved':
                for other in self.plans.values():
                    if other['id'] != plan_id and other['status'] == 'approved':
                        raise ConflictError(f"Plan {other['id']} is already approved")
            plan['status'] = status
        self._record('plan_status', f"Plan {plan['version']} from {plan['pra_name']} is now {status}",
                     reference=plan_id, actor=actor)
        return dict(plan)

    def compare_plans(self, plan_a_id, plan_b_id):
        """Per-category comparison of two plans; differences are b minus a"""
        plan_a = self._get_plan(plan_a_id)
        plan_b = self._get_plan(plan_b_id)
        categories = {}
        for field in COMPARISON_FIELDS:
            a, b = plan_a.get(field, 0), plan_b.get(field, 0)
            categories[field] = {
                'plan_a': a,
                'plan_b': b,
                'difference': round(b - a, 2),
                'better': plan_a_id if a > b else plan_b_id if b > a else None,
            }

        better, other = (plan_a, plan_b) if plan_a['npv_value'] >= plan_b['npv_value'] else (plan_b, plan_a)
        advantage = None
        if other['npv_value']:
            advantage = round((better['npv_value'] - other['npv_value']) / other['npv_value'] * 100, 1)
        return {
            'plan_a': dict(plan_a),
            'plan_b': dict(plan_b),
            'categories': categories,
            'better_plan': better['id'],
            'npv_advantage_percentage': advantage,
        }

    def set_liquidation_value(self, values, actor=None):
        errors = []
        figures = {}
        for field in RECOVERY_CATEGORIES + ('total_recovery', 'npv_value'):
            if values.get(field) is None:
                errors.append(f'{field} is required')
                continue
            try:
                figures[field] = non_negative_number(values[field], field)
            except ValidationError as e:
                errors.append(e.message)
        if errors:
            raise ValidationError(errors)
        with self._lock:
            self.liquidation_value = figures
        self._record('liquidation_value_set', f"Liquidation value recorded at NPV {figures['npv_value']}",
                     actor=actor)
        return dict(figures)

    def compare_with_liquidation(self, plan_id):
        """Surplus of a plan over the liquidation value, per creditor class"""
        plan = self._get_plan(plan_id)
        if self.liquidation_value is None:
            raise ConflictError('Liquidation value has not been recorded')
        liquidation = self.liquidation_value
        surplus = {field: round(plan.get(field, 0) - liquidation[field], 2)
                   for field in RECOVERY_CATEGORIES + ('total_recovery', 'npv_value')}
        return {
            'plan': dict(plan),
            'liquidation_value': dict(liquidation),
            'surplus': surplus,
            'exceeds_liquidation': plan['npv_value'] > liquidation['npv_value'],
        }
