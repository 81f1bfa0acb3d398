"""
Email subscriptions via the Buttondown API.

Subscribing an address that is already on the list is treated as success:
the existing subscriber gets the topic tag merged in instead.
Requires BUTTONDOWN_API_KEY.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from travel_safety.analytics import AnalyticsLog
from travel_safety.errors import ConfigurationError, SubscriptionError
from travel_safety.models import utc_now_iso

logger = logging.getLogger(__name__)

BUTTONDOWN_SUBSCRIBERS_URL = "https://api.buttondown.email/v1/subscribers"
SUBSCRIBER_SOURCE = "is-it-safe"

DEFAULT_TOPIC_ID = "is-it-safe"
DEFAULT_TOPIC_NAME = "Is It Safe Updates"

MSG_SUBSCRIBED = "Successfully subscribed! You'll receive travel safety updates and alerts."
MSG_TOPIC_ADDED = "You're now subscribed to this topic!"
MSG_ALREADY = "You're already subscribed! We'll keep you posted."


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and '@' in email


def _error_message(response: requests.Response) -> str:
    text = response.text or ''
    try:
        data = response.json()
    except ValueError:
        return text or 'Failed to subscribe'
    if isinstance(data, dict):
        if data.get('detail'):
            return str(data['detail'])
        if data.get('code'):
            return f"Error: {data['code']}"
    return text or 'Failed to subscribe'


class ButtondownClient:
    """Thin client for the Buttondown subscribers API."""

    def __init__(self, api_key: str = '', timeout: int = 30,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        if not self.is_configured():
            raise ConfigurationError('Server misconfigured: BUTTONDOWN_API_KEY missing')
        return {
            'Authorization': f'Token {self.api_key}',
            'Content-Type': 'application/json',
        }

    def create_subscriber(self, email: str, topic_id: str, topic_name: str) -> Dict[str, Any]:
        body = {
            'email_address': email,
            'tags': [topic_id],
            'metadata': {
                'topicName': topic_name,
                'source': SUBSCRIBER_SOURCE,
                'subscribedAt': utc_now_iso(),
            },
        }
        response = self.session.post(BUTTONDOWN_SUBSCRIBERS_URL, json=body,
                                     headers=self._headers(), timeout=self.timeout)
        logger.info(f"Buttondown create subscriber: HTTP {response.status_code}")
        if not response.ok:
            raise SubscriptionError(_error_message(response))
        return response.json()

    def find_subscriber(self, email: str) -> Dict[str, Any]:
        response = self.session.get(BUTTONDOWN_SUBSCRIBERS_URL, params={'email': email},
                                    headers=self._headers(), timeout=self.timeout)
        if not response.ok:
            raise SubscriptionError('Failed to find subscriber')
        data = response.json()
        if not isinstance(data, dict):
            raise SubscriptionError('Unexpected subscriber lookup response')
        results = data.get('results') or []
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            raise SubscriptionError('Subscriber not found')
        return results[0]

    def add_topic(self, email: str, topic_id: str, topic_name: str) -> Dict[str, Any]:
        """Merge a topic tag and metadata entry into an existing subscriber."""
        subscriber = self.find_subscriber(email)
        tags: List[str] = list(subscriber.get('tags') or [])
        if topic_id not in tags:
            tags.append(topic_id)

        metadata = dict(subscriber.get('metadata') or {})
        # Buttondown metadata values must be strings
        metadata[f'topic_{topic_id}'] = json.dumps({'name': topic_name, 'subscribedAt': utc_now_iso()})
        metadata['source'] = SUBSCRIBER_SOURCE

        response = self.session.patch(f"{BUTTONDOWN_SUBSCRIBERS_URL}/{subscriber.get('id')}",
                                      json={'tags': tags, 'metadata': metadata},
                                      headers=self._headers(), timeout=self.timeout)
        logger.info(f"Buttondown update subscriber: HTTP {response.status_code}")
        if not response.ok:
            raise SubscriptionError(f'Failed to update subscriber: {response.text}')
        return response.json()


class SubscriptionService:

    def __init__(self, client: ButtondownClient, analytics: Optional[AnalyticsLog] = None):
        self.client = client
        self.analytics = analytics

    def _log_error(self, stage: str, email: Optional[str], error: str):
        if self.analytics is None:
            return
        try:
            self.analytics.log('widget_notify_me_subscribe_error', stage=stage, email=email, error=error)
        except OSError as e:
            logger.error(f"Failed to log subscribe error: {e}")

    def subscribe(self, email: str, topic_id: Optional[str] = None,
                  topic_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Subscribe an email address to a topic.

        Returns {'success': True, 'message': ...}. Raises ValueError for an
        invalid address, ConfigurationError when no API key is set, and
        SubscriptionError / requests.RequestException for upstream failures.
        """
        if not is_valid_email(email):
            raise ValueError('Invalid email address')
        if not self.client.is_configured():
            raise ConfigurationError('Server misconfigured: BUTTONDOWN_API_KEY missing')

        topic_id = topic_id or DEFAULT_TOPIC_ID
        topic_name = topic_name or DEFAULT_TOPIC_NAME

        try:
            self.client.create_subscriber(email, topic_id, topic_name)
            return {'success': True, 'message': MSG_SUBSCRIBED}
        except SubscriptionError as e:
            message = str(e).strip()
            if 'already' not in message.lower():
                self._log_error('subscribe', email, message or 'unknown_error')
                raise

        logger.info(f"Subscriber already on list, adding topic {topic_id}")
        try:
            self.client.add_topic(email, topic_id, topic_name)
            return {'success': True, 'message': MSG_TOPIC_ADDED}
        except (SubscriptionError, requests.RequestException, ValueError) as e:
            logger.warning(f"Update subscriber failed, returning graceful success: {e}")
            self._log_error('update', email, str(e))
            return {'success': True, 'message': MSG_ALREADY}
