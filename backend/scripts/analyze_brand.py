#!/usr/bin/env python3
"""
Run one competitor analysis from the command line and print the report as JSON.
Uses the same Creative Source / Intelligence Store configuration as the API (.env).
Run from backend/: python -m scripts.analyze_brand "Acme Coffee" [--no-record] [--seed 42]
"""
import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Analyze a competitor brand's active ads.")
    parser.add_argument("brand", help="Brand name to look up in the Ad Library")
    parser.add_argument("--no-record", action="store_true", help="Skip writing to the Intelligence Store")
    parser.add_argument("--seed", type=int, default=None, help="Seed for synthetic data (reproducible runs)")
    return parser.parse_args(argv)


async def main(argv=None):
    args = parse_args(argv)
    if args.seed is not None:
        os.environ["SYNTHETIC_SEED"] = str(args.seed)

    from adintel.config import get_settings
    from adintel.dependencies import (
        build_analysis_service,
        get_creative_source,
        get_intelligence_store,
        get_recorder,
    )
    from adintel.errors import InvalidInput

    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    if not args.no_record and settings.intelligence_store_backend == "database":
        from adintel.database import init_db
        try:
            await init_db()
        except Exception as e:
            print(f"Warning: database unavailable, the report will not be recorded ({e})", file=sys.stderr)

    service = build_analysis_service(get_creative_source(), get_recorder(get_intelligence_store()))
    try:
        report = await service.analyze(args.brand, record=not args.no_record)
    except InvalidInput as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    print(json.dumps(report.model_dump(by_alias=True, mode="json"), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
