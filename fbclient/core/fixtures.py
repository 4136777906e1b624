from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from fbclient.core.envelope import ResponseEnvelope


def load_json_fixture(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def envelope_from_fixture(payload: Dict[str, Any]) -> ResponseEnvelope:
    body = payload.get("body", "")
    if not isinstance(body, str):
        body = json.dumps(body, separators=(",", ":"))
    return ResponseEnvelope(
        status_code=int(payload.get("status_code", 200)),
        content_type=payload.get("content_type", "text/javascript; charset=UTF-8"),
        response_uri=payload["response_uri"],
        body=body,
        headers=dict(payload.get("headers") or {}),
    )


def load_response_fixture(base_dir: Path, name: str) -> ResponseEnvelope:
    return envelope_from_fixture(load_json_fixture(base_dir / name))


__all__ = ["envelope_from_fixture", "load_json_fixture", "load_response_fixture"]
