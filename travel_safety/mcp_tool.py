"""
MCP tool server exposing the `is-it-safe` tool.

All arguments are optional; calling with no arguments tells the host to let
the user pick a location in the widget. When the host sends no location but
forwards the user's message in request metadata, a location is inferred from
that text. The result echoes the (possibly inferred) arguments, a summary
block, follow-up suggestions and, when the location resolves, the composite
assessment.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Mapping, Optional

from mcp.server.fastmcp import Context, FastMCP
from pydantic import BaseModel, ConfigDict, ValidationError

from travel_safety.config import DATA_SOURCES
from travel_safety.container import SafetyServices
from travel_safety.errors import LocationNotFound
from travel_safety.inference import infer_location, text_from_meta
from travel_safety.models import utc_now_iso
from travel_safety.watchdog import monitor_function

logger = logging.getLogger(__name__)

SERVER_NAME = "Is It Safe"
TOOL_NAME = "is-it-safe"
TOOL_DESCRIPTION = (
    "Use this tool to check travel safety data for any city or country. Shows official "
    "travel advisories from US State Department and UK Foreign Office, conflict data from "
    "ACLED, and news analysis from GDELT. Call this tool immediately with NO arguments to "
    "let the user search for a location manually. Only provide arguments if the user has "
    "explicitly stated a location."
)

SUGGESTED_FOLLOWUPS = [
    "What are the main safety concerns?",
    "Is it safe for solo travelers?",
    "What areas should I avoid?",
    "Are there any recent incidents?",
]

LOCATION_FIELDS = ('location', 'country', 'city')


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra='forbid')

    location: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    include_news: Optional[bool] = None
    include_conflict: Optional[bool] = None


def compute_summary(args: Mapping[str, Any]) -> Dict[str, Any]:
    city = args.get('city') or ''
    country = args.get('country') or ''

    if city:
        query_type = 'city'
    elif country:
        query_type = 'country'
    else:
        query_type = 'general'

    return {
        'location': args.get('location') or city or country or 'Not specified',
        'country': country,
        'city': city,
        'query_type': query_type,
        'data_sources': list(DATA_SOURCES),
    }


def _inferred_query(args: Mapping[str, Any]) -> str:
    parts = []
    if args.get('location'):
        parts.append(f"Location: {args['location']}")
    if args.get('country'):
        parts.append(f"Country: {args['country']}")
    if args.get('city'):
        parts.append(f"City: {args['city']}")
    return ', '.join(parts)


def _log_analytics(services: SafetyServices, event: str, **data) -> None:
    try:
        services.analytics.log(event, **data)
    except OSError as e:
        logger.error(f"Failed to write analytics event {event}: {e}")


def _apply_inference(args: Dict[str, Any], meta: Mapping[str, Any], services: SafetyServices) -> None:
    if any(args.get(field) for field in LOCATION_FIELDS):
        return
    inferred = infer_location(text_from_meta(meta), services.resolver)
    if inferred is None:
        return
    args['location'] = inferred.name
    if inferred.is_city:
        args['city'] = inferred.name
        args['country'] = inferred.country
    else:
        args['country'] = inferred.country


@monitor_function(warn_slow=10.0)
def build_tool_result(raw_args: Optional[Mapping[str, Any]], meta: Optional[Mapping[str, Any]],
                      services: SafetyServices) -> Dict[str, Any]:
    """
    Run one `is-it-safe` tool call.

    Args:
        raw_args: tool arguments as sent by the host
        meta: request metadata (free text and user context), may be empty
        services: the shared service graph

    Returns:
        The structured tool result. An unresolvable location yields
        `assessment: None` plus a not-found `error` message instead of raising.
    """
    start_time = time.time()
    meta = meta or {}

    try:
        parsed = ToolArguments.model_validate(dict(raw_args or {}))
    except ValidationError as e:
        _log_analytics(services, 'parameter_parse_error', toolName=TOOL_NAME,
                       params=dict(raw_args or {}), error=str(e))
        raise

    try:
        args = parsed.model_dump(exclude_none=True)
        _apply_inference(args, meta, services)
        used_defaults = not args

        location = services.resolver.resolve_fields(
            location=args.get('location'),
            country=args.get('country'),
            city=args.get('city'),
        )
        assessment = None
        if location is not None:
            assessment = services.assessment.assess(
                location,
                include_news=args.get('include_news', True),
                include_conflict=args.get('include_conflict', True),
            ).model_dump()

        result = {
            'ready': True,
            'timestamp': utc_now_iso(),
            **args,
            'input_source': 'default' if used_defaults else 'user',
            'summary': compute_summary(args),
            'suggested_followups': list(SUGGESTED_FOLLOWUPS),
            'assessment': assessment,
        }
        query = args.get('city') or args.get('location') or args.get('country')
        if location is None and query:
            result['error'] = str(LocationNotFound(query))
    except Exception as e:
        _log_analytics(services, 'tool_call_error', toolName=TOOL_NAME, error=str(e),
                       responseTime=round((time.time() - start_time) * 1000))
        raise

    response_time = round((time.time() - start_time) * 1000)
    if location is not None:
        _log_analytics(services, 'tool_call_success', toolName=TOOL_NAME, params=args,
                       inferredQuery=_inferred_query(args), responseTime=response_time,
                       userLocation=meta.get('openai/userLocation'),
                       userLocale=meta.get('openai/locale'),
                       resolved=location.key)
    elif not query:
        _log_analytics(services, 'tool_call_empty', toolName=TOOL_NAME, params=args,
                       reason='No location provided')
    else:
        _log_analytics(services, 'tool_call_empty', toolName=TOOL_NAME, params=args,
                       inferredQuery=_inferred_query(args), reason='Location not found')
    return result


def request_meta(ctx: Optional[Context]) -> Dict[str, Any]:
    """Best-effort extraction of the request `_meta` mapping from an MCP context."""
    if ctx is None:
        return {}
    try:
        meta = ctx.request_context.meta
    except (AttributeError, LookupError, ValueError):
        return {}
    if meta is None:
        return {}
    if isinstance(meta, Mapping):
        return dict(meta)
    return meta.model_dump(by_alias=True)


def create_mcp_server(services: SafetyServices, host: str = '127.0.0.1', port: int = 8001) -> FastMCP:
    """Build a FastMCP server with the `is-it-safe` tool bound to `services`."""
    mcp = FastMCP(SERVER_NAME, host=host, port=port)

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    async def is_it_safe(
        ctx: Context,
        location: Optional[str] = None,
        country: Optional[str] = None,
        city: Optional[str] = None,
        include_news: Optional[bool] = None,
        include_conflict: Optional[bool] = None,
    ) -> Dict[str, Any]:
        raw_args = {
            'location': location,
            'country': country,
            'city': city,
            'include_news': include_news,
            'include_conflict': include_conflict,
        }
        # requests I/O blocks, keep it off the event loop
        return await asyncio.to_thread(
            build_tool_result,
            {key: value for key, value in raw_args.items() if value is not None},
            request_meta(ctx),
            services,
        )

    return mcp
