# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
OpenAPI to MCP converter.

Turns every operation of an OpenAPI 3 document into a tool definition whose
input schema merges path, query and header parameters with the JSON request
body, and records what is needed to execute it again.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from openapi_mcp_server.core.errors import ConfigurationError
from openapi_mcp_server.openapi.models import (
    ConversionResult,
    OperationRecord,
    ParameterLocation,
    ParameterSpec,
    ToolDefinition,
    ToolMethod,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")
MAX_TOOL_NAME_LENGTH = 64

_PARAMETER_LOCATIONS = {
    "path": ParameterLocation.PATH,
    "query": ParameterLocation.QUERY,
    "header": ParameterLocation.HEADER,
}


def build_tool_name(resource: Optional[str], method_name: str) -> str:
    """Join resource and method, then cut to the protocol's name limit."""
    full_name = f"{resource}-{method_name}" if resource else method_name
    return truncate_tool_name(full_name)


def truncate_tool_name(name: str) -> str:
    # Truncate only; two long names sharing a prefix will collide.
    if len(name) <= MAX_TOOL_NAME_LENGTH:
        return name
    return name[:MAX_TOOL_NAME_LENGTH]


class SpecConverter:
    """Converts an OpenAPI document into MCP tools and an operation lookup."""

    def __init__(self, document: Dict[str, Any], resource_name: Optional[str] = "API"):
        """
        Args:
            document: Parsed OpenAPI 3 document (never mutated)
            resource_name: Group name prefixed to every tool; falsy for none

        Raises:
            ConfigurationError: If the document declares no server URL
        """
        servers = document.get("servers") or []
        base_url = None
        if servers and isinstance(servers[0], dict):
            base_url = servers[0].get("url")
        if not base_url:
            raise ConfigurationError("No base URL found in OpenAPI spec", parameter="servers")

        self.document = document
        self.base_url: str = base_url
        self.resource_name = resource_name or ""

    def convert(self) -> ConversionResult:
        """
        Convert all operations, in declaration order.

        Returns:
            ConversionResult with grouped tool methods, the reverse lookup
            keyed by exposed tool name, and the flat tool definitions
        """
        tools: Dict[str, List[ToolMethod]] = {}
        lookup: Dict[str, OperationRecord] = {}
        definitions: List[ToolDefinition] = []

        for path, path_item in (self.document.get("paths") or {}).items():
            path_item = self._resolve_schema(path_item or {})
            shared_parameters = path_item.get("parameters") or []

            for method, operation in path_item.items():
                if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                    continue

                record, tool_method = self._convert_operation(path, method.lower(), operation, shared_parameters)
                tools.setdefault(self.resource_name, []).append(tool_method)

                tool_name = build_tool_name(self.resource_name, tool_method.name)
                if tool_name in lookup:
                    logger.warning(
                        f"Tool name collision after truncation: {tool_name} "
                        f"({lookup[tool_name].operation_id} keeps it, {record.operation_id} is unreachable)"
                    )
                else:
                    lookup[tool_name] = record

                definitions.append(
                    ToolDefinition(
                        name=tool_name,
                        description=tool_method.description,
                        input_schema=tool_method.input_schema,
                        return_schema=tool_method.return_schema,
                    )
                )

        logger.info(f"Converted {len(definitions)} operations into MCP tools")
        return ConversionResult(tools=tools, lookup=lookup, definitions=definitions)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _convert_operation(
        self,
        path: str,
        method: str,
        operation: Dict[str, Any],
        shared_parameters: List[Dict[str, Any]],
    ) -> Tuple[OperationRecord, ToolMethod]:
        operation_id = operation.get("operationId") or self._fallback_operation_id(method, path)

        properties: Dict[str, Any] = {}
        required: List[str] = []
        parameters: List[ParameterSpec] = []

        for param in self._merge_parameters(shared_parameters, operation.get("parameters") or []):
            location = _PARAMETER_LOCATIONS.get(param.get("in"))
            name = param.get("name")
            if location is None or not name:
                logger.debug(f"Skipping parameter {name!r} in {param.get('in')!r} for {operation_id}")
                continue

            schema = dict(param.get("schema") or {"type": "string"})
            if param.get("description") and "description" not in schema:
                schema["description"] = param["description"]

            is_required = bool(param.get("required")) or location == ParameterLocation.PATH
            properties[name] = schema
            if is_required:
                required.append(name)
            parameters.append(ParameterSpec(name=name, location=location, required=is_required, schema=schema))

        has_body = False
        body_is_object = False
        request_body = operation.get("requestBody")
        body_schema = self._json_schema(request_body) if request_body else None
        if body_schema is not None:
            has_body = True
            if body_schema.get("type") == "object" or "properties" in body_schema:
                body_is_object = True
                body_required = set(body_schema.get("required") or [])
                for prop_name, prop_schema in (body_schema.get("properties") or {}).items():
                    if prop_name in properties:
                        logger.debug(f"Body property {prop_name} shadowed by a parameter in {operation_id}")
                        continue
                    is_required = prop_name in body_required
                    properties[prop_name] = prop_schema
                    if is_required:
                        required.append(prop_name)
                    parameters.append(
                        ParameterSpec(
                            name=prop_name,
                            location=ParameterLocation.BODY,
                            required=is_required,
                            schema=prop_schema,
                        )
                    )
            else:
                is_required = bool(request_body.get("required"))
                properties["body"] = body_schema
                if is_required:
                    required.append("body")
                parameters.append(
                    ParameterSpec(name="body", location=ParameterLocation.BODY, required=is_required, schema=body_schema)
                )

        input_schema: Dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            input_schema["required"] = required

        record = OperationRecord(
            operation_id=operation_id,
            method=method.upper(),
            path=path,
            parameters=tuple(parameters),
            has_body=has_body,
            body_is_object=body_is_object,
        )
        tool_method = ToolMethod(
            name=operation_id,
            description=self._describe(method, path, operation),
            input_schema=input_schema,
            return_schema=self._return_schema(operation),
        )
        return record, tool_method

    def _merge_parameters(
        self, shared: List[Dict[str, Any]], own: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """Path-level parameters first; operation-level ones replace them by (name, in)."""
        merged: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
        for param in [*shared, *own]:
            param = self._resolve_schema(param)
            merged[(param.get("name"), param.get("in"))] = param
        return list(merged.values())

    def _describe(self, method: str, path: str, operation: Dict[str, Any]) -> str:
        description = operation.get("summary") or operation.get("description") or f"{method.upper()} {path}"

        error_lines = []
        for code, response in (operation.get("responses") or {}).items():
            if str(code).startswith("2"):
                continue
            response = self._resolve_schema(response or {})
            error_lines.append(f"{code}: {response.get('description', '')}".rstrip())

        if error_lines:
            description += "\nError Responses:\n" + "\n".join(error_lines)
        return description

    def _return_schema(self, operation: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for code, response in (operation.get("responses") or {}).items():
            if str(code).startswith("2"):
                schema = self._json_schema(response or {})
                if schema is not None:
                    return schema
        return None

    def _json_schema(self, holder: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Resolved JSON schema of a requestBody or response object."""
        holder = self._resolve_schema(holder)
        content = holder.get("content") or {}
        media = content.get("application/json")
        if media is None:
            media = next((value for key, value in content.items() if "json" in key), None)
        if not media or "schema" not in media:
            return None
        return media["schema"]

    def _fallback_operation_id(self, method: str, path: str) -> str:
        sanitized = path.strip("/").replace("/", "_").replace("{", "").replace("}", "")
        return f"{method}_{sanitized or 'root'}"

    # ------------------------------------------------------------------
    # $ref resolution
    # ------------------------------------------------------------------

    def _resolve_schema(self, node: Any, seen: Tuple[str, ...] = ()) -> Any:
        """
        Return a copy of ``node`` with every local $ref replaced inline.

        A reference that points back into its own expansion becomes a stub
        object schema, so recursive models stay finite.
        """
        if isinstance(node, list):
            return [self._resolve_schema(item, seen) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                return {"type": "object", "description": f"Circular reference to {ref}"}
            resolved = self._resolve_schema(self._lookup_ref(ref), seen + (ref,))
            siblings = {key: value for key, value in node.items() if key != "$ref"}
            if siblings and isinstance(resolved, dict):
                resolved = {**resolved, **self._resolve_schema(siblings, seen)}
            return resolved

        return {key: self._resolve_schema(value, seen) for key, value in node.items()}

    def _lookup_ref(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            raise ConfigurationError(f"External reference not supported: {ref}", parameter="$ref")

        target: Any = self.document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, dict) or part not in target:
                raise ConfigurationError(f"Unresolvable reference: {ref}", parameter="$ref")
            target = target[part]
        return target
