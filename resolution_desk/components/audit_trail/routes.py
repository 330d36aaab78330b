"""
Audit Trail API Routes
"""
from flask import Blueprint, current_app, jsonify, request

from resolution_desk.components import EXTENSION_KEY
from resolution_desk.core import ValidationError
from resolution_desk.core.audit import LEVELS

audit_trail_bp = Blueprint('audit_trail', __name__, url_prefix='/api')


@audit_trail_bp.route('/audit')
def api_audit():
    """Get audit entries with level/module/reference filtering"""
    level_filter = request.args.get('level', 'ALL').upper()
    if level_filter != 'ALL' and level_filter not in LEVELS:
        raise ValidationError(f"level must be one of: ALL, {', '.join(LEVELS)}")
    try:
        limit = int(request.args.get('limit', 50))
    except ValueError:
        raise ValidationError('limit must be an integer')
    if limit < 1:
        raise ValidationError('limit must be 1 or greater')

    audit = current_app.extensions[EXTENSION_KEY]['audit']
    entries = audit.get_entries(level_filter=level_filter,
                                module=request.args.get('module'),
                                reference=request.args.get('reference'),
                                limit=limit)
    return jsonify({'entries': entries, 'count': len(entries)})
