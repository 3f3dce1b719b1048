#!/usr/bin/env python3
"""Jira sync auth E2E sandbox runner.

This is a fast, hermetic integration test that validates:
- /health remains publicly accessible when auth is enabled
- service hook routes return 401 without Authorization
- valid Authorization reaches the route (no Jira traffic is needed for /schema)

It is executed in a separate process so the app reads auth configuration
from environment variables before import-time initialization.

Run:
  python3 scripts/e2e_auth_sandbox.py
"""

from __future__ import annotations

import base64
import os
import sys
from pathlib import Path

# Ensure repository root is importable
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


def _basic(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def main() -> int:
    os.environ["AUTH_ENABLED"] = "true"
    os.environ["AUTH_USERNAME"] = "e2e"
    os.environ["AUTH_PASSWORD"] = "secret"

    from fastapi.testclient import TestClient

    from jirasync.main import app

    schema_path = "/api/service-hooks/jira/schema"

    with TestClient(app) as client:
        r = client.get("/health")
        if r.status_code != 200:
            print(f"[e2e-auth] /health expected 200, got {r.status_code}: {r.text}")
            return 2

        r1 = client.get(schema_path)
        if r1.status_code != 401:
            print(f"[e2e-auth] {schema_path} expected 401, got {r1.status_code}: {r1.text}")
            return 2

        r2 = client.post("/api/service-hooks/jira/verification", json={})
        if r2.status_code != 401:
            print(f"[e2e-auth] verification expected 401, got {r2.status_code}: {r2.text}")
            return 2

        r3 = client.get(schema_path, headers={"Authorization": _basic("e2e", "secret")})
        if r3.status_code != 200:
            print(f"[e2e-auth] authed {schema_path} expected 200, got {r3.status_code}: {r3.text}")
            return 2

        r4 = client.get(schema_path, headers={"Authorization": _basic("e2e", "wrong")})
        if r4.status_code != 401:
            print(f"[e2e-auth] wrong password expected 401, got {r4.status_code}: {r4.text}")
            return 2

    print("[e2e-auth] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
