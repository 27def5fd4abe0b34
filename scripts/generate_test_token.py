#!/usr/bin/env python3
"""Print a bearer token for an existing user id, for manual API testing."""

import argparse

from skillmap.api.deps import issue_smoke_token


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("user_id", help="id of a row in the users table")
    parser.add_argument("--email", default=None)
    args = parser.parse_args()

    print(issue_smoke_token(args.user_id, email=args.email))


if __name__ == "__main__":
    main()
