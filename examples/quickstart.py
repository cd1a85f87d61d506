#!/usr/bin/env python3
"""
Inkpot Quickstart: the whole blog lifecycle, and what ownership means.

Signs up two users, writes, edits and lists blogs as one of them, and
shows that the other cannot see or touch those blogs.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

from _common import check_backend, client_for, signup


def main():
    check_backend()

    print("\n1. Signing up Alice and Bob...")
    alice = client_for(signup("Alice"))
    bob = client_for(signup("Bob"))

    print("\n2. Alice writes a blog...")
    resp = alice.post("/blog/create", json={
        "title": "Hello, Inkpot",
        "description": "My very first post.",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    blog = resp.json()["blog"]
    print(f"   Blog: {blog['title']} ({blog['id'][:8]}...)")

    print("\n3. Alice edits it...")
    resp = alice.put(f"/blog/update/{blog['id']}", json={
        "title": "Hello again, Inkpot",
        "description": "Edited after a second coffee.",
    })
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Title now: {resp.json()['blog']['title']}")

    print("\n4. Listing blogs...")
    print(f"   Alice sees {len(alice.get('/blog/myblogs').json()['blogs'])} blog(s)")
    print(f"   Bob sees   {len(bob.get('/blog/myblogs').json()['blogs'])} blog(s)")

    print("\n5. Bob tries to delete Alice's blog...")
    resp = bob.delete(f"/blog/delete/{blog['id']}")
    print(f"   {resp.status_code}: {resp.json()['detail']}")

    print("\n6. Alice deletes it...")
    resp = alice.delete(f"/blog/delete/{blog['id']}")
    print(f"   {resp.status_code}: {resp.json()['message']}")

    print("\nDone.")


if __name__ == "__main__":
    main()
