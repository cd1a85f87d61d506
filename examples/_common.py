"""
Shared helpers for Inkpot examples.

Handles the health check and account setup so each example can focus
on its specific workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api/v1"


def check_backend() -> None:
    """Verify the backend is reachable and its database is up."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  INKPOT_CREATE_TABLES=true uvicorn inkpot.main:app --reload --port 8000")
        sys.exit(1)

    health = resp.json()
    print(f"Backend: {health['status']} (v{health['version']})")
    if health["database"] != "ok":
        print(f"\nERROR: Database check failed: {health['database']}")
        sys.exit(1)


def signup(first_name: str) -> str:
    """Sign up a fresh user and return its token.

    Uses a unique email per run so examples can be re-run.
    """
    run_id = uuid.uuid4().hex[:8]
    resp = httpx.post(
        f"{BASE}/user/signup",
        json={
            "firstName": first_name,
            "lastName": "Demo",
            "email": f"{first_name.lower()}-{run_id}@example.com",
            "password": "demo-password-123",
        },
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Signup failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    return resp.json()["token"]


def client_for(token: str) -> httpx.Client:
    """An httpx Client that sends token as a Bearer header."""
    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )
