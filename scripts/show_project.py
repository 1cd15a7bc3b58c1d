#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path

from services.errors import ProjectNotFoundError
from services.project_service import ProjectService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show a stored science fair project")
    parser.add_argument("project_id", help="Project identifier")
    parser.add_argument(
        "--data-dir",
        default="./data",
        help="Data directory (default: ./data)",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Print full JSON instead of summary",
    )
    args = parser.parse_args(argv)

    service = ProjectService(Path(args.data_dir))
    try:
        if args.full:
            payload = service.get_project(args.project_id).model_dump(mode="json")
        else:
            payload = service.project_summary(args.project_id)
    except ProjectNotFoundError as err:
        raise SystemExit(str(err)) from err

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
