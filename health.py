from datetime import datetime

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health_check():
    """Health check endpoint for external monitoring"""
    return jsonify({
        'status': 'ok',
        'service': 'school-fee-ledger',
        'storage': current_app.extensions['fee_storage'].name,
        'version': '1.0.0',
        'timestamp': datetime.utcnow().isoformat() + 'Z'
    })
