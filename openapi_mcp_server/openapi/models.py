# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Data structures produced by the OpenAPI converter
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel


class ParameterLocation(str, Enum):
    """Where an argument ends up in the HTTP request."""
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"


@dataclass(frozen=True)
class ParameterSpec:
    """One input of an operation"""
    name: str
    location: ParameterLocation
    required: bool
    schema: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class OperationRecord:
    """
    Everything needed to execute one API operation.

    ``body_is_object`` is True when the request body's properties were
    flattened into the tool input; otherwise the whole body travels as the
    single ``body`` argument.
    """
    operation_id: str
    method: str
    path: str
    parameters: Tuple[ParameterSpec, ...] = ()
    has_body: bool = False
    body_is_object: bool = False

    def parameters_in(self, location: ParameterLocation) -> List[ParameterSpec]:
        return [p for p in self.parameters if p.location == location]


class ToolMethod(BaseModel):
    """One callable method grouped under a resource"""
    name: str
    description: str
    input_schema: Dict[str, Any]
    return_schema: Optional[Dict[str, Any]] = None


class ToolDefinition(BaseModel):
    """MCP Tool Definition as exposed to clients"""
    name: str
    description: str
    input_schema: Dict[str, Any]
    return_schema: Optional[Dict[str, Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        """Protocol boundary translation: snake_case fields to MCP camelCase."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ConversionResult:
    """Output of SpecConverter.convert()"""
    tools: Dict[str, List[ToolMethod]]
    lookup: Dict[str, OperationRecord]
    definitions: List[ToolDefinition]
