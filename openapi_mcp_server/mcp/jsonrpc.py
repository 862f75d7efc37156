# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
JSON-RPC 2.0 message shapes for the MCP protocol
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

RequestId = Union[str, int, None]


class JSONRPCMessage(BaseModel):
    """Inbound JSON-RPC envelope (request or notification)"""
    model_config = ConfigDict(extra="allow")

    jsonrpc: str
    method: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    id: RequestId = None

    @field_validator("jsonrpc")
    @classmethod
    def check_version(cls, v: str) -> str:
        if v != "2.0":
            raise ValueError("Invalid JSON-RPC version")
        return v

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


def build_result_response(request_id: RequestId, result: Dict[str, Any]) -> Dict:
    """Build JSON-RPC success response"""
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "result": result
    }


def build_error_response(
    request_id: RequestId, code: int, message: str, data: Optional[Dict] = None
) -> Dict:
    """Build JSON-RPC error response"""
    error = {"code": code, "message": message}
    if data:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def build_initialize_result(
    protocol_version: str, server_info: Dict[str, Any], capabilities: Dict[str, Any]
) -> Dict:
    """Build the result payload of an initialize request"""
    return {
        "protocolVersion": protocol_version,
        "capabilities": capabilities,
        "serverInfo": server_info
    }
