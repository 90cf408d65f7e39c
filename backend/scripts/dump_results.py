"""CLI helper for printing the timing and results views of the configured provider page."""

from __future__ import annotations

import argparse
import json
import sys
from typing import List

from splits_core import MissingInputError, SplitsSource, UpstreamUnavailable, build_views


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", help="Provider results page (defaults to SPLITS_SOURCE_URL)")
    parser.add_argument("--view", choices=("timing", "results"), help="Print only one view")
    args = parser.parse_args(argv)

    source = SplitsSource(source_url=args.url, cache_seconds=0)
    try:
        records = source.fetch_raw_records()
    except (UpstreamUnavailable, MissingInputError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    views = build_views(records)
    payload = views[args.view] if args.view else views
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
