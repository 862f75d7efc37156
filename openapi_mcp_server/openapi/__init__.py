# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
OpenAPI document handling: loading and conversion to MCP tools.
"""

from openapi_mcp_server.openapi.converter import SpecConverter, build_tool_name, truncate_tool_name
from openapi_mcp_server.openapi.loader import load_openapi_document
from openapi_mcp_server.openapi.models import (
    ConversionResult,
    OperationRecord,
    ParameterLocation,
    ParameterSpec,
    ToolDefinition,
    ToolMethod,
)

__all__ = [
    "SpecConverter",
    "build_tool_name",
    "truncate_tool_name",
    "load_openapi_document",
    "ConversionResult",
    "OperationRecord",
    "ParameterLocation",
    "ParameterSpec",
    "ToolDefinition",
    "ToolMethod",
]
