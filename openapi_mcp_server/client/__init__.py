# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
HTTP execution of OpenAPI operations.
"""

from openapi_mcp_server.client.http_client import ConnectionConfig, HttpClient, UpstreamResponse

__all__ = ["ConnectionConfig", "HttpClient", "UpstreamResponse"]
