from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from typespeed import db
from typespeed.errors import StorageError, ValidationError
from typespeed.models import Score, VALID_LEVELS
import html
import math
import re
from typing import Any, Dict, List, Optional


scores = Blueprint('scores', __name__)

# Listed explicitly so a wrong method reaches the handler and gets a JSON 405
_ANY_METHOD = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'TRACE']
_NUMERIC_RE = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')


def _method_not_allowed(allowed: str):
    return jsonify({
        'success': False,
        'message': f'Method not allowed. Use {allowed}.'
    }), 405


def sanitize(value: Any) -> Any:
    """Trim and HTML-escape every string, recursing into lists and dicts."""
    if isinstance(value, dict):
        return {k: sanitize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize(v) for v in value]
    if isinstance(value, str):
        return html.escape(value.strip(), quote=True)
    return value


def is_numeric(value: Any) -> bool:
    """Finite ints, floats and numeric strings. Booleans do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        if not _NUMERIC_RE.match(value):
            return False
    elif not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def validate_score_data(data: Dict[str, Any]) -> List[str]:
    """Return every rule the payload breaks, in rule order."""
    errors = []

    level = data.get('level')
    if not level:
        errors.append('Level is required')
    elif level not in VALID_LEVELS:
        errors.append('Invalid level')

    score = data.get('score')
    if score is None or not is_numeric(score):
        errors.append('Score must be a number')
    elif float(score) < 0:
        errors.append('Score cannot be negative')

    total = data.get('total')
    if total is None or not is_numeric(total):
        errors.append('Total must be a number')
    elif float(total) <= 0:
        errors.append('Total must be greater than 0')

    if is_numeric(score) and is_numeric(total) and float(score) > float(total):
        errors.append('Score cannot be greater than total')

    percentage = data.get('percentage')
    if percentage is not None and not is_numeric(percentage):
        errors.append('Percentage must be a number')

    return errors


def _build_score(data: Dict[str, Any]) -> Score:
    errors = validate_score_data(data)
    if errors:
        raise ValidationError(errors)
    percentage = data.get('percentage')
    return Score(
        level=data['level'],
        score=int(float(data['score'])),
        total=int(float(data['total'])),
        percentage=int(float(percentage)) if percentage is not None else 0,
    )


def _insert_score(row: Score) -> int:
    try:
        db.session.add(row)
        db.session.commit()
    except (SQLAlchemyError, OverflowError) as exc:
        # OverflowError: value does not fit the column type
        db.session.rollback()
        raise StorageError(str(exc)) from exc
    return row.id


def parse_limit(raw: Optional[str], default: int, maximum: int) -> int:
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return default
    if limit < 1:
        return default
    return min(limit, maximum)


def _query_scores(level: Optional[str], limit: int) -> List[Score]:
    query = Score.query
    if level in VALID_LEVELS:
        query = query.filter_by(level=level)
    try:
        return query.order_by(Score.date_played.desc(), Score.id.desc()).limit(limit).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(str(exc)) from exc


def _query_statistics() -> List[Dict[str, Any]]:
    try:
        rows = (
            db.session.query(
                Score.level,
                func.count(Score.id),
                func.avg(Score.score),
                func.avg(Score.percentage),
                func.max(Score.score),
                func.min(Score.score),
            )
            .group_by(Score.level)
            .order_by(Score.level)
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(str(exc)) from exc
    return [
        {
            'level': level,
            'total_games': int(count),
            'avg_score': round(float(avg_score or 0), 2),
            'avg_percentage': round(float(avg_percentage or 0), 2),
            'max_score': int(max_score or 0),
            'min_score': int(min_score or 0),
        }
        for level, count, avg_score, avg_percentage, max_score, min_score in rows
    ]


@scores.route('/save_score', methods=_ANY_METHOD)
def save_score():
    if request.method != 'POST':
        return _method_not_allowed('POST')

    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'message': 'Invalid JSON data'}), 400

    data = sanitize(data)
    try:
        score_id = _insert_score(_build_score(data))
    except ValidationError as exc:
        current_app.logger.info(f"[score-save] rejected errors={exc.errors}")
        return jsonify({
            'success': False,
            'message': 'Validation failed',
            'errors': exc.errors
        }), 400
    except StorageError as exc:
        current_app.logger.error(f"[score-save] storage failure: {exc}")
        return jsonify({'success': False, 'message': f'Error saving score: {exc}'}), 500

    current_app.logger.info(f"[score-save] id={score_id} level={data['level']} score={data['score']}/{data['total']}")
    return jsonify({
        'success': True,
        'message': 'Score saved successfully',
        'id': score_id
    }), 200


@scores.route('/get_scores', methods=_ANY_METHOD)
def get_scores():
    if request.method != 'GET':
        return _method_not_allowed('GET')

    cfg = current_app.config
    level = sanitize(request.args.get('level'))
    limit = parse_limit(
        request.args.get('limit'),
        int(cfg.get('SCORES_DEFAULT_LIMIT', 50)),
        int(cfg.get('SCORES_MAX_LIMIT', 1000)),
    )
    stats_flag = request.args.get('includeStatistics', request.args.get('stats', ''))
    include_statistics = stats_flag.strip().lower() in ('true', '1')

    try:
        rows = _query_scores(level, limit)
        payload = {
            'success': True,
            'message': 'Scores retrieved successfully',
            'count': len(rows),
            'scores': [row.to_dict() for row in rows],
        }
        if include_statistics:
            payload['statistics'] = _query_statistics()
    except StorageError as exc:
        current_app.logger.error(f"[score-query] storage failure: {exc}")
        return jsonify({'success': False, 'message': f'Query failed: {exc}'}), 500

    current_app.logger.info(f"[score-query] level={level} limit={limit} count={payload['count']}")
    return jsonify(payload), 200
