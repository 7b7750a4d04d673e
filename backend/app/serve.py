"""
Production entry point.

Usage:
    python -m app.serve
    python -m app.serve --manifest > ecosystem.json
"""
import argparse
import json
from typing import Optional, Sequence

import uvicorn

from app.deployment import get_deployment_settings


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="app.serve", description="Run the OpinionPointer API")
    parser.add_argument(
        "--manifest",
        action="store_true",
        help="print the process manager manifest as JSON and exit",
    )
    args = parser.parse_args(argv)

    deployment = get_deployment_settings()
    if args.manifest:
        print(json.dumps(deployment.process_manifest(), indent=2))
        return

    uvicorn.run(deployment.app, **deployment.uvicorn_options())


if __name__ == "__main__":
    main()
