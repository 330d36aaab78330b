"""
Entity Management Business Logic
"""
import copy
from collections import Counter

from resolution_desk.components import register_component
from resolution_desk.core import DeskService, ConflictError, NotFoundError, ValidationError
from resolution_desk.core.identifiers import new_id
from resolution_desk.core.money import percentage
from resolution_desk.core.pagination import matches_search, paginate, sort_records
from resolution_desk.core.validators import (
    is_valid_cin, is_valid_email, is_valid_gstin, is_valid_ifsc, is_valid_indian_mobile,
    is_valid_llpin, is_valid_pan, non_negative_number, require_fields,
)
from .fixtures import DEMO_ENTITIES
from .mca_client import MCAClient

ENTITY_STATUSES = ('active', 'inactive', 'under_cirp', 'liquidation')

# Onboarding wizard steps and the fields that mark each as filled in
COMPLETION_STEPS = (
    ('basic_details', ('entity_name', 'cin_number', 'entity_type', 'pan')),
    ('address_contact', ('registered_office', 'registered_email', 'phone_number')),
    ('key_personnel', ('key_personnel',)),
    ('industry_details', ('industry_details',)),
    ('financial_records', ('financial_records',)),
    ('creditors', ('creditors',)),
    ('bank_documents', ('bank_documents',)),
)

IMMUTABLE_FIELDS = ('id', 'cin_number', 'created_at')

SUBRESOURCES = {
    'financial_records': ('fr', 'Financial record', ('document_type', 'financial_year')),
    'creditors': ('cr', 'Creditor', ('name', 'class', 'amount')),
    'bank_documents': ('bd', 'Bank document', ('bank_name', 'document_type', 'document_date')),
}


def _is_llp(entity_type):
    return (entity_type or '').strip().lower() in ('llp', 'limited liability partnership')


@register_component('entities')
class EntityService(DeskService):
    """Service for managing client entities and their onboarding data"""

    module = 'entities'

    def __init__(self, config=None, audit=None, clock=None, mca_client=None):
        super().__init__(config, audit, clock)
        self.entities = {}
        self.mca_client = mca_client or MCAClient(
            base_url=self.setting('MCA_API_URL', ''),
            timeout=self.setting('MCA_TIMEOUT', 5),
        )

    def seed(self):
        for entity in copy.deepcopy(DEMO_ENTITIES):
            entity['id'] = entity['cin_number']
            self._recompute_claim_total(entity)
            self.entities[entity['id']] = entity

    # ── Validation ──────────────────────────────────────────────

    def _validate(self, payload, creating):
        errors = []
        if creating:
            errors.extend(require_fields(payload, ('entity_type', 'cin_number', 'entity_name')))

        cin = payload.get('cin_number')
        if cin:
            if _is_llp(payload.get('entity_type')):
                if not is_valid_llpin(cin):
                    errors.append('cin_number must be a valid LLPIN (e.g. AAB-1234)')
            elif not is_valid_cin(cin):
                errors.append('cin_number must be a valid 21 character CIN')

        if payload.get('pan') and not is_valid_pan(payload['pan']):
            errors.append('pan is not a valid PAN')

        gstn = payload.get('gstn') or {}
        if gstn.get('available') and not is_valid_gstin(gstn.get('number')):
            errors.append('gstn.number is not a valid GSTIN')

        for index, account in enumerate(payload.get('bank_accounts') or []):
            if not is_valid_ifsc(account.get('ifsc_code')):
                errors.append(f'bank_accounts[{index}].ifsc_code is not a valid IFSC')
        if sum(1 for a in payload.get('bank_accounts') or [] if a.get('is_main')) > 1:
            errors.append('only one bank account can be marked as main')

        for field in ('registered_email', 'alternate_email', 'correspondence_email'):
            if payload.get(field) and not is_valid_email(payload[field]):
                errors.append(f'{field} is not a valid e-mail address')

        for section in ('directors', 'key_personnel'):
            for index, person in enumerate(payload.get(section) or []):
                if person.get('contact') and not is_valid_indian_mobile(person['contact']):
                    errors.append(f'{section}[{index}].contact is not a valid mobile number')

        if payload.get('status') and payload['status'] not in ENTITY_STATUSES:
            errors.append(f"status must be one of: {', '.join(ENTITY_STATUSES)}")

        if errors:
            raise ValidationError(errors)

    # ── Entity CRUD ─────────────────────────────────────────────

    def get_entity(self, entity_id):
        entity = self.entities.get(entity_id)
        if entity is None:
            raise NotFoundError('Entity', entity_id)
        return entity

    def get_my_entities(self, entity_type=None, status=None, search=None, page=1, limit=10):
        """List entities with optional type, status and free-text filters"""
        entities = list(self.entities.values())
        if entity_type:
            entities = [e for e in entities if (e.get('entity_type') or '').lower() == entity_type.lower()]
        if status:
            entities = [e for e in entities if e.get('status') == status]
        if search:
            entities = [e for e in entities
                        if matches_search(e, search, ('entity_name', 'cin_number', 'business_locations'))]
        entities = sort_records(entities, 'entity_name')
        return paginate(entities, page, limit)

    def create_entity(self, payload, actor=None):
        self._validate(payload, creating=True)
        entity_id = payload['cin_number']
        with self._lock:
            if entity_id in self.entities:
                raise ConflictError(f'Entity already registered: {entity_id}')

            now = self.now_iso()
            entity = {
                'directors': [],
                'bank_accounts': [],
                'business_locations': [],
                'key_personnel': [],
                'industry_details': [],
                'financial_records': [],
                'creditors': [],
                'bank_documents': [],
                'status': 'active',
            }
            entity.update(copy.deepcopy(payload))
            entity.update({'id': entity_id, 'created_at': now, 'updated_at': now})
            self._recompute_claim_total(entity)
            self.entities[entity_id] = entity

        self._record('entity_created', f"Entity {entity['entity_name']} created",
                     reference=entity_id, actor=actor)
        return entity

    def update_entity(self, entity_id, payload, actor=None):
        entity = self.get_entity(entity_id)
        changes = {k: v for k, v in payload.items() if k not in IMMUTABLE_FIELDS}
        merged = dict(entity, **changes)
        self._validate(merged, creating=False)
        with self._lock:
            entity.update(copy.deepcopy(changes))
            entity['updated_at'] = self.now_iso()
            self._recompute_claim_total(entity)
        self._record('entity_updated', f"Entity {entity['entity_name']} updated "
                     f"({', '.join(sorted(changes)) or 'no changes'})",
                     reference=entity_id, actor=actor)
        return entity

    def delete_entity(self, entity_id, actor=None):
        with self._lock:
            entity = self.entities.pop(entity_id, None)
        if entity is None:
            raise NotFoundError('Entity', entity_id)
        self._record('entity_deleted', f"Entity {entity['entity_name']} deleted",
                     reference=entity_id, actor=actor, level='WARNING')
        return True

    def verify_with_mca(self, cin):
        """Fetch master data for a CIN or LLPIN

        An unknown identifier yields an empty result so the caller can fall
        back to manual entry.
        """
        if not (is_valid_cin(cin) or is_valid_llpin(cin)):
            raise ValidationError('cin must be a valid CIN or LLPIN')
        result = self.mca_client.lookup(cin)
        self._record('mca_verification',
                     f"MCA lookup for {cin}: {'found' if result else 'not found'}", reference=cin)
        return result

    # ── Onboarding sections ─────────────────────────────────────

    def get_industry_details(self, entity_id):
        return self.get_entity(entity_id).get('industry_details', [])

    def update_industry_details(self, entity_id, industry_details):
        if not isinstance(industry_details, list):
            raise ValidationError('industry_details must be a list')
        errors = []
        for index, detail in enumerate(industry_details):
            if not detail.get('industry'):
                errors.append(f'industry_details[{index}].industry is required')
            for field in ('installed_capacity', 'sales_quantity', 'sales_value'):
                value = detail.get(field)
                if value is not None and (not isinstance(value, (int, float)) or value < 0):
                    errors.append(f'industry_details[{index}].{field} must be a non-negative number')
        if errors:
            raise ValidationError(errors)

        entity = self.get_entity(entity_id)
        with self._lock:
            entity['industry_details'] = copy.deepcopy(industry_details)
            entity['updated_at'] = self.now_iso()
        return entity['industry_details']

    def list_section(self, entity_id, section):
        self._check_section(section)
        return self.get_entity(entity_id).get(section, [])

    def add_section_item(self, entity_id, section, item, actor=None):
        """Append a financial record, creditor or bank document"""
        prefix, label, required = self._check_section(section)
        errors = require_fields(item, required)
        if section == 'creditors' and 'amount' in item:
            try:
                non_negative_number(item['amount'], 'amount')
            except ValidationError as e:
                errors.append(e.message)
        if errors:
            raise ValidationError(errors)

        entity = self.get_entity(entity_id)
        record = {'status': 'Pending'}
        record.update(copy.deepcopy(item))
        record['id'] = new_id(prefix)
        with self._lock:
            entity.setdefault(section, []).append(record)
            entity['updated_at'] = self.now_iso()
            self._recompute_claim_total(entity)
        self._record(f'{prefix}_added', f'{label} added to {entity_id}', reference=entity_id, actor=actor)
        return record

    def update_section_item(self, entity_id, section, item_id, updates, actor=None):
        _, label, _ = self._check_section(section)
        if section == 'creditors' and 'amount' in updates:
            non_negative_number(updates['amount'], 'amount')

        entity = self.get_entity(entity_id)
        for record in entity.get(section, []):
            if record['id'] == item_id:
                with self._lock:
                    record.update({k: v for k, v in updates.items() if k != 'id'})
                    entity['updated_at'] = self.now_iso()
                    self._recompute_claim_total(entity)
                return record
        raise NotFoundError(label, item_id)

    def _check_section(self, section):
        if section not in SUBRESOURCES:
            raise NotFoundError('Section', section)
        return SUBRESOURCES[section]

    @staticmethod
    def _recompute_claim_total(entity):
        entity['total_claim_amount'] = sum(c.get('amount') or 0 for c in entity.get('creditors', []))

    # ── Derived views ───────────────────────────────────────────

    def profile_completion(self, entity_id):
        """Share of onboarding steps that have data"""
        entity = self.get_entity(entity_id)
        completed, missing = [], []
        for step, fields in COMPLETION_STEPS:
            if all(entity.get(field) for field in fields):
                completed.append(step)
            else:
                missing.append(step)
        return {
            'entity_id': entity_id,
            'percentage': percentage(len(completed), len(COMPLETION_STEPS)),
            'completed_steps': completed,
            'missing_steps': missing,
        }

    def get_entity_stats(self):
        entities = list(self.entities.values())
        return {
            'total': len(entities),
            'by_status': dict(Counter(e.get('status', 'active') for e in entities)),
            'by_type': dict(Counter(e.get('entity_type', 'Unknown') for e in entities)),
        }
