"""
Write the OpenAPI schema of the task service to a JSON file, so API clients
and documentation tools can use it without running the server.

Usage:
    task-tracker-openapi [OUTPUT_PATH]

The default output is interfaces/openapi.json under the current directory.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI

DEFAULT_OUTPUT = Path("interfaces") / "openapi.json"


def _merge_tags(schema: Dict[str, Any], tags: List[Dict[str, Any]]) -> None:
    # Tag metadata already present in the generated schema wins over ours
    merged = {t["name"]: t for t in tags}
    merged.update({t["name"]: t for t in schema.get("tags") or [] if isinstance(t, dict) and "name" in t})
    if merged:
        schema["tags"] = list(merged.values())


# PUBLIC_INTERFACE
def generate_openapi(
    output: Union[str, Path] = DEFAULT_OUTPUT,
    app: Optional[FastAPI] = None,
) -> Path:
    """Generate the OpenAPI schema file and return the written file path."""
    from .main import create_app, openapi_tags
    from .repositories import InMemoryTaskStore

    # The schema does not depend on the store; avoid touching a real database
    app = app or create_app(store=InMemoryTaskStore())
    schema = app.openapi()
    _merge_tags(schema, openapi_tags)

    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main() -> None:
    output = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT
    out_path = generate_openapi(output)
    print(f"Wrote OpenAPI schema to: {out_path}")


if __name__ == "__main__":
    main()
