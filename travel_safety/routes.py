"""
REST endpoints consumed by the widget, mounted under /api.

The upstream proxies (/uk, /gdelt, /acled) call the raising provider methods
directly so failures surface as HTTP status codes instead of `Unavailable`.
CORS, preflight and Cache-Control are handled in flask_middleware.
"""

import logging

import requests
from flask import Blueprint, current_app, jsonify, request

from travel_safety.errors import ConfigurationError, LocationNotFound, ParseError, SubscriptionError, UpstreamError
from travel_safety.providers.uk_provider import MissingAdviceDetails
from travel_safety.sentiment_store import to_response

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)

EXTENSION_KEY = 'travel_safety'

FALSE_VALUES = ('0', 'false', 'no', 'off')


def get_services():
    return current_app.extensions[EXTENSION_KEY]


def _arg(name: str) -> str:
    return (request.args.get(name) or '').strip()


def _flag(name: str, default: bool = True) -> bool:
    raw = request.args.get(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() not in FALSE_VALUES


def _log_analytics(event: str, **data) -> None:
    try:
        get_services().analytics.log(event, **data)
    except OSError as e:
        logger.error(f"Failed to write analytics event {event}: {e}")


@api_bp.route('/uk', methods=['GET'])
def uk_advice():
    """UK FCDO advice by gov.uk slug, e.g. ?country=japan"""
    country = _arg('country')
    if not country:
        return jsonify({'error': 'Missing country'}), 400

    try:
        record = get_services().uk.get_advice(country)
    except UpstreamError as e:
        return jsonify({'error': 'UK upstream error', 'status': e.status}), 502
    except MissingAdviceDetails:
        return jsonify({'error': 'UK advice missing details'}), 404
    except (ParseError, requests.RequestException) as e:
        logger.error(f"UK proxy error for {country}: {e}")
        return jsonify({'error': 'Failed to fetch UK advice', 'message': str(e)}), 500

    return jsonify(record.model_dump())


@api_bp.route('/gdelt', methods=['GET'])
def gdelt_sentiment():
    location = _arg('location')
    if not location:
        return jsonify({'error': 'Missing location'}), 400

    try:
        record = get_services().gdelt.get_sentiment(location)
    except UpstreamError as e:
        return jsonify({'error': 'GDELT upstream error', 'status': e.status, 'details': e.details}), 502
    except ParseError as e:
        return jsonify({'error': 'GDELT upstream error', 'status': 502, 'details': e.raw or e.message}), 502
    except requests.RequestException as e:
        logger.error(f"GDELT proxy error for {location}: {e}")
        return jsonify({'error': 'Failed to fetch GDELT', 'message': str(e)}), 500

    return jsonify(record.model_dump())


@api_bp.route('/acled', methods=['GET'])
def acled_conflict():
    country = _arg('country')
    if not country:
        return jsonify({'error': 'Missing country'}), 400

    try:
        record = get_services().acled.get_conflict(country)
    except UpstreamError as e:
        return jsonify({'error': 'ACLED upstream error', 'status': e.status, 'details': e.details}), 502
    except (ConfigurationError, ParseError, requests.RequestException) as e:
        logger.error(f"ACLED proxy error for {country}: {e}")
        return jsonify({'error': 'Failed to fetch ACLED', 'message': str(e)}), 500

    return jsonify(record.model_dump())


@api_bp.route('/sentiment', methods=['GET', 'POST'])
def community_sentiment():
    """Community vote counters; POST {"vote": "safe"|"unsafe"} records one vote."""
    location = request.args.get('location')
    if not location:
        return jsonify({'error': 'Missing location parameter'}), 400

    store = get_services().sentiment

    if request.method == 'GET':
        return jsonify(to_response(store.get(location)))

    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return jsonify({'error': 'Invalid JSON body'}), 400

    vote = body.get('vote')
    try:
        counts = store.vote(location, vote)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    _log_analytics('sentiment_vote', location=location, vote=vote)
    return jsonify(to_response(counts))


@api_bp.route('/subscribe', methods=['POST'])
def subscribe():
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        body = {}

    # settlementId/settlementName are the widget's older field names
    email = body.get('email')
    topic_id = body.get('topicId') or body.get('settlementId')
    topic_name = body.get('topicName') or body.get('settlementName')

    service = get_services().subscriptions
    try:
        result = service.subscribe(email, topic_id, topic_name)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except ConfigurationError as e:
        logger.error(str(e))
        return jsonify({'error': str(e)}), 500
    except SubscriptionError as e:
        return jsonify({'error': str(e) or 'Failed to subscribe. Please try again.'}), 500
    except requests.RequestException as e:
        logger.error(f"Subscribe error: {e}")
        _log_analytics('widget_notify_me_subscribe_error', stage='handler', email=None, error=str(e))
        return jsonify({'error': 'Failed to subscribe. Please try again.'}), 500

    return jsonify(result)


@api_bp.route('/track', methods=['POST'])
def track_event():
    """Widget analytics. Accepts {event, data} or {event, ...fields}."""
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return jsonify({'error': 'Invalid JSON body'}), 400

    event = body.get('event')
    if not event:
        return jsonify({'error': 'Missing event name'}), 400

    data = body.get('data') or body
    if not isinstance(data, dict):
        data = {'data': data}
    fields = {key: value for key, value in data.items() if key not in ('event', 'timestamp')}

    _log_analytics(f'widget_{event}', **fields)
    return jsonify({'success': True})


@api_bp.route('/assessment', methods=['GET'])
def assessment():
    """Composite score for ?location=, optionally without news or conflict data."""
    location = _arg('location')
    if not location:
        return jsonify({'error': 'Missing location'}), 400

    try:
        result = get_services().assessment.assess_query(
            location,
            include_news=_flag('include_news'),
            include_conflict=_flag('include_conflict'),
        )
    except LocationNotFound as e:
        return jsonify({'error': str(e), 'query': e.query}), 404

    return jsonify(result.model_dump())
