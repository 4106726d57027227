"""JSON output formatter for CLI."""

import json
import sys
from enum import Enum as _Enum
from typing import Any, Dict, List, Optional, TextIO

from ...catalog import ProviderSummary
from ...refresh import RefreshResult


def _default_serializer(obj: Any) -> Any:
    """Serialize otherwise non-JSON-serializable objects.

    - Enum -> value (fallback to name)
    - Fallback -> str(obj)
    """
    if isinstance(obj, _Enum):
        return getattr(obj, "value", obj.name)
    return str(obj)


def format_json(data: Any, output: Optional[TextIO] = None, indent: int = 2) -> None:
    """Format data as JSON and write to output.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
        indent: JSON indentation level
    """
    if output is None:
        output = sys.stdout

    json.dump(
        data,
        output,
        indent=indent,
        ensure_ascii=False,
        default=_default_serializer,
    )
    output.write("\n")


def format_models_json(summaries: List[ProviderSummary]) -> Dict[str, Any]:
    """Format catalog summaries for JSON output.

    Provider and model order is preserved as given.
    """
    return {
        "providers": [summary.to_dict() for summary in summaries],
        "count": sum(len(summary.models) for summary in summaries),
    }


def format_providers_json(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Format provider rows for JSON output."""
    return {"providers": rows, "count": len(rows)}


def format_refresh_json(result: RefreshResult) -> Dict[str, Any]:
    """Format a refresh result for JSON output."""
    return {
        "status": result.status.value,
        "message": result.message,
        "model_counts": dict(sorted(result.model_counts.items())),
        "failed_providers": result.failed_providers,
        "skipped_providers": result.skipped_providers,
    }
