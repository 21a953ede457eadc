from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pickup import db

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the pickup games server!'})


@main.route('/api/health')
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[health] database unreachable: {exc}")
        return jsonify({'status': 'degraded', 'database': 'unavailable'}), 503
    return jsonify({'status': 'ok', 'database': 'ok'})
