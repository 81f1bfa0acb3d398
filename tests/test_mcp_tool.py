"""Tests for the `is-it-safe` MCP tool."""

import asyncio
import threading
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from travel_safety.config import DATA_SOURCES
from travel_safety.mcp_tool import (
    SUGGESTED_FOLLOWUPS,
    TOOL_NAME,
    build_tool_result,
    compute_summary,
    create_mcp_server,
    request_meta,
)


def events_logged(services, name):
    return [entry for entry in services.analytics.recent() if entry.get('event') == name]


def test_no_arguments_returns_default_result(services):
    result = build_tool_result({}, {}, services)

    assert result['ready'] is True
    assert result['input_source'] == 'default'
    assert result['assessment'] is None
    assert result['summary']['location'] == 'Not specified'
    assert result['summary']['query_type'] == 'general'
    assert result['suggested_followups'] == SUGGESTED_FOLLOWUPS
    assert events_logged(services, 'tool_call_empty')[0]['reason'] == 'No location provided'
    assert events_logged(services, 'tool_call_success') == []


def test_location_argument_is_assessed(services):
    result = build_tool_result({'location': 'Tokyo'}, {'openai/locale': 'en-US'}, services)

    assert result['location'] == 'Tokyo'
    assert result['input_source'] == 'user'
    assert result['assessment']['location']['key'] == 'tokyo'
    assert result['assessment']['label'] == 'Low Risk'

    logged = events_logged(services, 'tool_call_success')[0]
    assert logged['inferredQuery'] == 'Location: Tokyo'
    assert logged['resolved'] == 'tokyo'
    assert logged['userLocale'] == 'en-US'


def test_city_argument_wins_over_location(services):
    result = build_tool_result({'location': 'France', 'city': 'Kyoto'}, None, services)
    assert result['assessment']['location']['key'] == 'kyoto'
    assert result['summary']['query_type'] == 'city'


def test_unresolvable_location_reports_not_found(services):
    result = build_tool_result({'location': 'Atlantis'}, {}, services)

    assert result['assessment'] is None
    assert result['input_source'] == 'user'
    assert result['error'] == "Location not found: 'Atlantis'"
    assert events_logged(services, 'tool_call_success') == []
    assert events_logged(services, 'tool_call_empty')[0]['reason'] == 'Location not found'


def test_flags_without_location_are_not_a_lookup_failure(services):
    result = build_tool_result({'include_news': False}, {}, services)

    assert result['assessment'] is None
    assert 'error' not in result
    assert events_logged(services, 'tool_call_empty')[0]['reason'] == 'No location provided'


def test_resolved_location_has_no_error(services):
    assert 'error' not in build_tool_result({'city': 'Kyoto'}, {}, services)


def test_include_news_false_skips_gdelt(services):
    result = build_tool_result({'country': 'Japan', 'include_news': False}, {}, services)
    assert result['include_news'] is False
    assert result['assessment']['sentiment'] is None
    assert result['assessment']['skipped_sources'] == ['gdelt']


def test_location_is_inferred_from_meta_text(services):
    meta = {'openai/subject': 'Is it safe to travel to Egypt?'}

    result = build_tool_result({}, meta, services)

    assert result['location'] == 'Egypt'
    assert result['country'] == 'Egypt'
    assert result['input_source'] == 'user'
    assert result['summary']['query_type'] == 'country'
    assert result['assessment']['location']['key'] == 'egypt'


def test_inferred_city_fills_city_and_country(services):
    result = build_tool_result({}, {'openai/userText': 'is Lagos safe'}, services)
    assert result['city'] == 'Lagos'
    assert result['country'] == 'Nigeria'


def test_inference_is_skipped_when_arguments_given(services):
    result = build_tool_result({'country': 'Peru'}, {'openai/subject': 'is Lagos safe'}, services)
    assert 'city' not in result
    assert result['assessment']['location']['key'] == 'peru'


@pytest.mark.parametrize('raw_args', [
    {'location': 'Paris', 'radius': 5},
    {'include_news': 'sometimes'},
])
def test_invalid_arguments_raise_and_are_logged(services, raw_args):
    with pytest.raises(ValidationError):
        build_tool_result(raw_args, {}, services)
    assert len(events_logged(services, 'parameter_parse_error')) == 1


def test_assessment_failure_is_logged_and_raised(services):
    services.assessment = MagicMock()
    services.assessment.assess.side_effect = RuntimeError('scorer exploded')

    with pytest.raises(RuntimeError):
        build_tool_result({'location': 'Tokyo'}, {}, services)

    assert events_logged(services, 'tool_call_error')[0]['error'] == 'scorer exploded'


def test_compute_summary():
    summary = compute_summary({'country': 'Japan', 'city': 'Tokyo'})
    assert summary == {
        'location': 'Tokyo',
        'country': 'Japan',
        'city': 'Tokyo',
        'query_type': 'city',
        'data_sources': DATA_SOURCES,
    }


def test_request_meta_reads_mapping():
    ctx = MagicMock()
    ctx.request_context.meta = {'openai/subject': 'hi'}
    assert request_meta(ctx) == {'openai/subject': 'hi'}


def test_request_meta_outside_a_request():
    class NoRequest:
        @property
        def request_context(self):
            raise ValueError('Context is not available outside of a request')

    assert request_meta(NoRequest()) == {}
    assert request_meta(None) == {}


def test_server_registers_tool(services):
    mcp = create_mcp_server(services)
    tools = asyncio.run(mcp.list_tools())
    assert [tool.name for tool in tools] == [TOOL_NAME]
    assert 'ctx' not in tools[0].inputSchema['properties']
    assert set(tools[0].inputSchema['properties']) == {
        'location', 'country', 'city', 'include_news', 'include_conflict'}


def test_tool_calls_do_not_block_each_other(services):
    # each assessment waits for the other one; serialised calls would break the barrier
    barrier = threading.Barrier(2, timeout=5)
    real_assess = services.assessment.assess

    def assess_alongside_peer(*args, **kwargs):
        barrier.wait()
        return real_assess(*args, **kwargs)

    services.assessment = MagicMock()
    services.assessment.assess.side_effect = assess_alongside_peer
    mcp = create_mcp_server(services)

    async def call_twice():
        await asyncio.gather(
            mcp.call_tool(TOOL_NAME, {'location': 'Tokyo'}),
            mcp.call_tool(TOOL_NAME, {'country': 'Peru'}),
        )

    asyncio.run(call_twice())

    assert services.assessment.assess.call_count == 2
    assert events_logged(services, 'tool_call_error') == []
