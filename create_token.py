#!/usr/bin/env python3
"""
Issue a bearer token for a principal.

The API has no accounts; whoever holds a token signed with the
configured ``SECRET_KEY`` acts as the principal named in it.  Run this
with the same environment as the server.

Usage:
    python create_token.py --principal clinic-42 --days 365
"""

import argparse

from medicine_tracker_api.app.core.security import create_access_token


def main():
    ap = argparse.ArgumentParser(description="Create a Medicine Tracker API access token.")
    ap.add_argument("--principal", required=True, help="Caller identity to embed as the token subject")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days (default: 365)")
    args = ap.parse_args()

    token = create_access_token({"sub": args.principal}, expires_delta=args.days * 24 * 60 * 60)
    print(token)


if __name__ == "__main__":
    main()
