"""Lightweight REST client for the leetboard API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the leetboard REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--search", default="", help="Search term for the user list")
    parser.add_argument("--skill", default="all", help="Skill level facet")
    parser.add_argument("--sort-by", default="total_solved", help="Sort key")
    parser.add_argument("--user", metavar="LEETCODE_ID", help="Fetch a single user and exit")
    parser.add_argument("--reload", action="store_true", help="Reload the data sources first")
    parser.add_argument("--leaderboard", type=int, metavar="N", help="Print the top N users and exit")
    parser.add_argument("--export-path", type=Path, help="Download the user list as CSV")
    parser.add_argument("--test-supabase", action="store_true", help="Run the hosted table connection test")
    args = parser.parse_args()

    params = {"search": args.search, "skill": args.skill, "sort_by": args.sort_by}

    with httpx.Client(base_url=args.base_url) as client:
        if args.reload:
            resp = client.post("/reload")
            resp.raise_for_status()
            print("Reload:", json.dumps(resp.json(), indent=2))

        if args.test_supabase:
            resp = client.get("/supabase/test")
            if resp.status_code >= 500:
                raise SystemExit(f"Supabase test failed: {resp.json().get('detail')}")
            print(json.dumps(resp.json(), indent=2))
            return

        if args.user:
            resp = client.get(f"/users/{args.user}")
            if resp.status_code == 404:
                raise SystemExit(f"user {args.user} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.leaderboard:
            resp = client.get("/analytics/leaderboard", params={"limit": args.leaderboard})
            resp.raise_for_status()
            for entry in resp.json():
                print(f"{entry['rank']:>3}. {entry['display_name']} ({entry['total_solved']})")
            return

        if args.export_path:
            resp = client.get("/users/export.csv", params=params)
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")
            return

        resp = client.get("/users", params=params)
        resp.raise_for_status()
        payload = resp.json()
        print("Stats:", json.dumps(payload["stats"], indent=2))
        print(f"Showing {payload['showing']} of {payload['total']} users (source: {payload['source']})")
        for user in payload["users"][:10]:
            print(f"  {user['display_name']} @{user['leetcode_id']}: {user['total_solved']}")


if __name__ == "__main__":
    main()
