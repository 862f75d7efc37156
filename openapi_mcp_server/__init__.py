# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
OpenAPI MCP Server - exposes an OpenAPI-described HTTP API as MCP tools over SSE.
"""

__version__ = "1.0.0"
