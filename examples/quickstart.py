#!/usr/bin/env python3
"""
GameHound Quickstart — the dashboard's API calls in one script.

Registers two users → creates projects → shows ownership scoping →
updates → stats → deletes.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: gamehound serve  (http://localhost:3000)
"""

import sys
import uuid

import httpx

BASE = "http://localhost:3000/api"


def register(client: httpx.Client, name: str, run_id: str) -> dict:
    resp = client.post("/register", json={
        "email": f"{name.lower()}-{run_id}@studio.dev",
        "password": "demo-password-123",
        "name": name,
    })
    assert resp.status_code == 200, f"Failed: {resp.text}"
    data = resp.json()
    print(f"   {name}: user #{data['user']['id']}")
    return {"Authorization": f"Bearer {data['token']}"}


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        sys.exit(1)
    health = resp.json()
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")
    print(f"  Redis:    {'✓' if health['redis'] == 'ok' else '✗ (rate limiting off)'}")

    # ── Register two users ────────────────────────────────────────
    print("\n1. Registering users...")
    ann = register(client, "Ann", run_id)
    ben = register(client, "Ben", run_id)

    # ── Create projects ───────────────────────────────────────────
    print("\n2. Creating projects as Ann...")
    ids = []
    for title, status, progress in [
        ("Silksong", "active", 85),
        ("Half-Life 3", "planned", 10),
    ]:
        resp = client.post("/projects", headers=ann, json={
            "title": title, "status": status, "progress": progress,
        })
        assert resp.status_code == 200, f"Failed: {resp.text}"
        ids.append(resp.json()["id"])
        print(f"   #{ids[-1]} {title} ({status}, {progress}%)")

    # ── Scoping ───────────────────────────────────────────────────
    print("\n3. Listing...")
    print(f"   Ann sees {len(client.get('/projects', headers=ann).json())} project(s)")
    print(f"   Ben sees {len(client.get('/projects', headers=ben).json())} project(s)")

    # ── Update: owner vs. stranger ────────────────────────────────
    print("\n4. Updating Silksong...")
    resp = client.put(f"/projects/{ids[0]}", headers=ben, json={"progress": 0})
    print(f"   Ben:  {resp.json()['result']}")
    resp = client.put(f"/projects/{ids[0]}", headers=ann, json={"status": "completed", "progress": 100})
    print(f"   Ann:  {resp.json()['result']}")

    # ── Stats ─────────────────────────────────────────────────────
    stats = client.get("/projects/stats", headers=ann).json()
    print(f"\n5. Ann's dashboard: {stats['total']} projects, "
          f"{stats['average_progress']}% average progress, {stats['by_status']}")

    # ── Delete ────────────────────────────────────────────────────
    print("\n6. Cleaning up...")
    for pid in ids:
        resp = client.delete(f"/projects/{pid}", headers=ann)
        print(f"   #{pid}: {resp.json()['result']}")

    print("\nDone.")


if __name__ == "__main__":
    main()
