# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
OpenAPI document loading (JSON or YAML)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from openapi_mcp_server.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_openapi_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read an OpenAPI document from disk.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        Parsed document

    Raises:
        ConfigurationError: If the file is missing, unparseable, or not an OpenAPI 3 document
    """
    spec_path = Path(path)
    if not spec_path.exists():
        raise ConfigurationError(f"OpenAPI spec not found at {spec_path}", parameter="openapi_spec_path")

    text = spec_path.read_text(encoding="utf-8")
    try:
        if spec_path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse OpenAPI spec {spec_path}: {e}", parameter="openapi_spec_path")

    if not isinstance(document, dict) or not str(document.get("openapi", "")).startswith("3."):
        raise ConfigurationError(f"{spec_path} is not an OpenAPI 3 document", parameter="openapi_spec_path")

    logger.info(f"Loaded OpenAPI spec from {spec_path}")
    return document
