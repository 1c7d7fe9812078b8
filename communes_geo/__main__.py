"""CLI entrypoint for communes_geo."""

from __future__ import annotations

import argparse
import json
import sys

from communes_geo.errors import CommunesError
from communes_geo.logging_config import setup_logging


def main(argv: list[str] | None = None) -> int:
    setup_logging()

    parser = argparse.ArgumentParser(prog="communes-geo")
    parser.add_argument("--source", default=None, help="Path to the communes dataset (JSON)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")
    sub.add_parser("stats")

    search_parser = sub.add_parser("search")
    search_parser.add_argument("--nom")
    search_parser.add_argument("--code-postal", dest="code_postal")
    search_parser.add_argument("--code")
    search_parser.add_argument("--lat", type=float)
    search_parser.add_argument("--lon", type=float)

    args = parser.parse_args(argv)

    try:
        if args.command == "serve":
            _serve()
        elif args.command == "stats":
            _stats(args.source)
        elif args.command == "search":
            _search(args)
    except CommunesError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


def _serve() -> None:
    import uvicorn

    from communes_geo.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "communes_geo.api:app",
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.log_level.lower(),
    )


def _stats(source: str | None) -> None:
    from communes_geo.database import get_indexed_db

    db = get_indexed_db(source_path=source)
    print(json.dumps(db.stats(), indent=2))


def _search(args: argparse.Namespace) -> None:
    from communes_geo.database import get_indexed_db

    criteria = {
        "nom": args.nom,
        "codePostal": args.code_postal,
        "code": args.code,
        "lat": args.lat,
        "lon": args.lon,
    }
    criteria = {k: v for k, v in criteria.items() if v is not None}

    db = get_indexed_db(source_path=args.source)
    results = db.search(criteria)
    print(json.dumps([c.to_dict() for c in results], ensure_ascii=False, indent=2))


if __name__ == "__main__":
    sys.exit(main())
