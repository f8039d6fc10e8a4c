#!/usr/bin/env python3
"""Smoke test for a running salon API: upload, wait for the salon image, restyle, download."""

import sys
import time
from pathlib import Path

import httpx


BASE_URL = "http://127.0.0.1:8000"


def wait_for_styling(client: httpx.Client, session_id: str, timeout: float = 180.0) -> dict:
    """Poll the session until no transformation is in flight."""
    deadline = time.monotonic() + timeout
    while True:
        session = client.get(f"/sessions/{session_id}").json()
        if session["stage"] not in ("transforming-base", "restyling"):
            return session
        if time.monotonic() > deadline:
            raise TimeoutError(f"Session still {session['stage']} after {timeout:.0f}s")
        time.sleep(2.0)


def main():
    if len(sys.argv) < 2:
        print("Usage: python3 scripts/smoke_api.py <photo.jpg> [haircut] [color] [look]")
        sys.exit(2)
    photo = Path(sys.argv[1])
    style = dict(zip(("haircut", "color", "look"), sys.argv[2:5]))

    client = httpx.Client(base_url=BASE_URL, timeout=30.0)
    try:
        client.get("/health").raise_for_status()
        print("✅ Server is running\n")
    except Exception:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn salon.main:app --reload")
        sys.exit(1)

    try:
        session_id = client.post("/sessions").json()["session_id"]
        print(f"Session: {session_id}")

        r = client.post(
            f"/sessions/{session_id}/files",
            content=photo.read_bytes(),
            headers={"Content-Type": "image/jpeg", "X-Filename": photo.name},
        )
        r.raise_for_status()
        print(f"Uploaded {photo.name} -> {r.json()['storage_id']}")

        session = wait_for_styling(client, session_id)
        if session["stage"] != "styling":
            print(f"❌ Salon transform failed: {session['last_error']}")
            sys.exit(1)
        print(f"✅ Salon image: {session['base_image']['url']}")

        if style:
            client.put(f"/sessions/{session_id}/style", json=style).raise_for_status()
        client.post(f"/sessions/{session_id}/restyle").raise_for_status()
        session = wait_for_styling(client, session_id)
        if session["last_error"]:
            print(f"❌ Restyle failed: {session['last_error']}")
            sys.exit(1)
        print(f"✅ Styled image: {session['styled_image']['url']}")

        r = client.get(f"/sessions/{session_id}/download", follow_redirects=False)
        print(f"Download: {r.status_code} -> {r.headers.get('location')}")
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
