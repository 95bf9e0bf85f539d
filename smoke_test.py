#!/usr/bin/env python3
"""
Mail-Relay Smoke Test — Post sample instructions to a running server
to check the parse → (optional) send flow end to end.

Usage:
    python smoke_test.py
    python smoke_test.py "Email bob@example.com about the budget review."
    python smoke_test.py --send --api http://localhost:3000/api

With --send each parsed result is relayed to the configured webhook,
so point N8N_WEBHOOK at a test workflow first.
"""

import argparse
import json
import sys

import httpx

SAMPLE_MESSAGES = [
    # about-cue
    "Please send mail to test@example.com about the meeting.",
    # explicit Subject line; must not leak into the body
    "Subject: Dinner Invitation\n\nDear Shlok Panchal,\n\nThis is to inform you that dinner is now ready.",
    # saying-cue
    "Please send mail to test@example.com saying Dinner Invitation",
]


def parse(client: httpx.Client, api: str, message: str) -> dict:
    resp = client.post(f"{api}/message", json={"message": message})
    resp.raise_for_status()
    return resp.json()


def send(client: httpx.Client, api: str, data: dict) -> httpx.Response:
    parsed = data["parsed"]
    return client.post(f"{api}/send", json={
        "to": parsed["to"],
        "subject": parsed["subject"],
        "body": parsed["body"],
        "messageId": data["messageId"],
    })


def main():
    parser = argparse.ArgumentParser(description="Smoke test a running Mail-Relay server")
    parser.add_argument("messages", nargs="*", help="Instructions to parse (default: built-in samples)")
    parser.add_argument("--api", default="http://localhost:3000/api", help="API base URL")
    parser.add_argument("--send", action="store_true", help="Also relay each parsed result")
    parser.add_argument("--timeout", default=15, type=float, help="Request timeout in seconds")
    args = parser.parse_args()

    messages = args.messages or SAMPLE_MESSAGES
    health_url = args.api.rsplit("/api", 1)[0] + "/health"

    print(f"\n🔌 Checking {health_url}")
    with httpx.Client(timeout=args.timeout) as client:
        try:
            client.get(health_url).raise_for_status()
        except httpx.HTTPError as e:
            print(f"❌ Server not healthy: {e}")
            sys.exit(1)
        print("✅ Server is up")

        failures = 0
        for i, message in enumerate(messages, 1):
            print()
            print("=" * 60)
            print(f"📨 Test {i}: {message!r}")
            print("=" * 60)
            try:
                data = parse(client, args.api, message)
            except httpx.HTTPError as e:
                print(f"❌ Parse failed: {e}")
                failures += 1
                continue

            print(json.dumps(data, indent=2))
            if "Subject:" in data["parsed"]["body"]:
                print("⚠️  Subject line leaked into body")
                failures += 1

            if args.send:
                resp = send(client, args.api, data)
                if resp.status_code == 200:
                    print(f"📤 Sent: {resp.json()}")
                else:
                    print(f"🚫 Send returned {resp.status_code}: {resp.text}")
                    failures += 1

    print()
    if failures:
        print(f"❌ {failures} problem(s) found")
        sys.exit(1)
    print("✅ All smoke tests passed")


if __name__ == "__main__":
    main()
