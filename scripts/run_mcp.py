#!/usr/bin/env python3
"""
MCP server launcher for Is It Safe?.

Usage:
    python scripts/run_mcp.py            # SSE on MCP_PORT (default 8001)
    python scripts/run_mcp.py --stdio    # stdio transport for local hosts
"""

import logging
import os
import sys

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)
os.chdir(project_root)

from dotenv import load_dotenv

load_dotenv(os.path.join(project_root, '.env'))


def main():
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        stream=sys.stderr,
    )

    from travel_safety.container import build_services
    from travel_safety.mcp_tool import create_mcp_server
    from travel_safety.paths import ensure_dirs_exist

    ensure_dirs_exist()
    services = build_services()
    settings = services.settings
    mcp = create_mcp_server(services, host=settings.host, port=settings.mcp_port)

    if '--stdio' in sys.argv[1:]:
        mcp.run(transport='stdio')
    else:
        print(f"  MCP (SSE): http://{settings.host}:{settings.mcp_port}/sse", file=sys.stderr)
        mcp.run(transport='sse')


if __name__ == '__main__':
    main()
