# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Process entry point: load configuration and the API document, serve with uvicorn.
"""

import logging

import uvicorn
from dotenv import load_dotenv

from openapi_mcp_server.core.config import get_config
from openapi_mcp_server.core.logging import configure_logging
from openapi_mcp_server.openapi.loader import load_openapi_document
from openapi_mcp_server.server import create_app

logger = logging.getLogger(__name__)


def run():
    """Start the MCP proxy server"""
    # Local development; containers inject the environment directly
    load_dotenv()

    config = get_config()
    configure_logging(config.log_level, config.log_format)

    document = load_openapi_document(config.openapi_spec_path)
    app = create_app(config, document)

    logger.info(f"Starting {config.server_name} on {config.host}:{config.port}")
    logger.info(f"SSE endpoint: http://{config.host}:{config.port}/sse?credential=YOUR_KEY")
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    run()
