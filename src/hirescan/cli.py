"""HireScan CLI: command-line interface for requisition scanning.

Usage:
    python -m hirescan.cli status
    python -m hirescan.cli skills
    python -m hirescan.cli add-skill --employee e-1 --skill 1 --level 4
    python -m hirescan.cli remove-skill --employee e-1 --skill 1
    python -m hirescan.cli create-requisition --manager m-1 --title "Data Engineer" --skills 1,2
    python -m hirescan.cli create-requisition --manager m-1 --title "Analyst" --skills 1 --scan
    python -m hirescan.cli scan --id 1
    python -m hirescan.cli show --id 1
    python -m hirescan.cli open-roles
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from hirescan.config import ScanSettings
from hirescan.errors import ScanError
from hirescan.models.skill import proficiency_label
from hirescan.persistence.event_log import EventLog
from hirescan.persistence.sqlite_store import SqliteWorkforceStore
from hirescan.service import HiringService
from hirescan.skills.catalog import SkillCatalog

logger = logging.getLogger(__name__)


def _settings(args: argparse.Namespace) -> ScanSettings:
    settings = ScanSettings.from_env()
    overrides = {}
    if args.config_dir is not None:
        overrides["config_dir"] = args.config_dir
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _make_store(settings: ScanSettings) -> tuple[SqliteWorkforceStore, SkillCatalog]:
    """Open the store and make sure the configured catalog is seeded."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    catalog = SkillCatalog.from_config_dir(settings.config_dir)
    store = SqliteWorkforceStore(
        settings.database_path, timeout_seconds=settings.db_timeout_seconds,
    )
    store.seed_catalog(catalog)
    return store, catalog


def _make_service(settings: ScanSettings) -> HiringService:
    store, catalog = _make_store(settings)
    try:
        event_log: Optional[EventLog] = EventLog(storage_path=settings.event_log_path)
    except ValueError as e:
        # Scans do not depend on the audit trail; run without it
        logger.warning("Audit log disabled: %s", e)
        event_log = None
    return HiringService(catalog, store, store, event_log=event_log)


def _parse_skill_ids(raw: str) -> list[int]:
    if not raw.strip():
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"--skills must be comma-separated integers, got '{raw}'"
        ) from None


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_status(args: argparse.Namespace) -> int:
    service = _make_service(args.settings)
    _print_json(service.status())
    return 0


def cmd_skills(args: argparse.Namespace) -> int:
    _, catalog = _make_store(args.settings)
    _print_json([
        {"id": s.skill_id, "name": s.name, "category": s.category}
        for s in catalog.all_skills()
    ])
    return 0


def cmd_add_skill(args: argparse.Namespace) -> int:
    store, _ = _make_store(args.settings)
    try:
        store.set_employee_skill(args.employee, args.skill, args.level)
    except (ScanError, ValueError) as e:
        print(f"Failed: {e}", file=sys.stderr)
        return 1
    print(
        f"Recorded skill {args.skill} for {args.employee}: "
        f"{proficiency_label(args.level)} ({args.level}/5)"
    )
    return 0


def cmd_remove_skill(args: argparse.Namespace) -> int:
    store, _ = _make_store(args.settings)
    if not store.remove_employee_skill(args.employee, args.skill):
        print(f"Failed: {args.employee} does not hold skill {args.skill}", file=sys.stderr)
        return 1
    print(f"Removed skill {args.skill} from {args.employee}")
    return 0


def cmd_create_requisition(args: argparse.Namespace) -> int:
    service = _make_service(args.settings)
    create = service.submit_requisition if args.scan else service.create_requisition
    result = create(
        manager_id=args.manager,
        role_title=args.title,
        department=args.department,
        required_skill_ids=args.skills,
    )
    if result.success:
        if args.scan:
            _print_json(result.data)
        else:
            print(f"Created requisition: {result.data['requisition_id']} ({result.data['status']})")
        return 0
    kind = result.data.get("error_kind")
    prefix = f"Failed ({kind})" if kind else "Failed"
    print(f"{prefix}: {'; '.join(result.errors)}", file=sys.stderr)
    return 1


def cmd_scan(args: argparse.Namespace) -> int:
    service = _make_service(args.settings)
    result = service.scan_requisition(args.id)
    if result.success:
        _print_json(result.data)
        return 0
    print(
        f"Failed ({result.data.get('error_kind')}): {'; '.join(result.errors)}",
        file=sys.stderr,
    )
    return 1


def cmd_show(args: argparse.Namespace) -> int:
    service = _make_service(args.settings)
    req = service.get_requisition(args.id)
    if req is None:
        print(f"Failed: Requisition not found: {args.id}", file=sys.stderr)
        return 1
    _print_json(req.to_dict())
    return 0


def cmd_open_roles(args: argparse.Namespace) -> int:
    service = _make_service(args.settings)
    _print_json([r.to_dict() for r in service.list_open_roles()])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hirescan",
        description="HireScan: requisition scanning for internal candidates",
    )
    parser.add_argument(
        "--config-dir", type=Path, default=None,
        help="Directory holding skill_catalog.json (default: $HIRESCAN_CONFIG_DIR or config/)",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None,
        help="Directory for the database and event log (default: $HIRESCAN_DATA_DIR or data/)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show requisition counts by status")
    sub.add_parser("skills", help="List the skill catalog")

    p_add = sub.add_parser("add-skill", help="Record a skill held by an employee")
    p_add.add_argument("--employee", required=True, help="Employee ID")
    p_add.add_argument("--skill", required=True, type=int, help="Skill ID")
    p_add.add_argument(
        "--level", type=int, default=3, choices=range(1, 6),
        help="Proficiency level 1-5 (default: 3)",
    )

    p_rm = sub.add_parser("remove-skill", help="Remove a skill from an employee")
    p_rm.add_argument("--employee", required=True, help="Employee ID")
    p_rm.add_argument("--skill", required=True, type=int, help="Skill ID")

    p_create = sub.add_parser("create-requisition", help="Create a requisition")
    p_create.add_argument("--manager", required=True, help="Manager ID")
    p_create.add_argument("--title", required=True, help="Role title")
    p_create.add_argument("--department", default="", help="Department")
    p_create.add_argument(
        "--skills", type=_parse_skill_ids, default=[],
        help="Comma-separated required skill IDs",
    )
    p_create.add_argument(
        "--scan", action="store_true",
        help="Scan for internal candidates right after creating",
    )

    p_scan = sub.add_parser("scan", help="Scan a requisition for internal candidates")
    p_scan.add_argument("--id", required=True, type=int, help="Requisition ID")

    p_show = sub.add_parser("show", help="Show a requisition")
    p_show.add_argument("--id", required=True, type=int, help="Requisition ID")

    sub.add_parser("open-roles", help="List requisitions open to internal applicants")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        args.settings = _settings(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=args.settings.log_level,
        format="%(asctime)s:%(levelname)s:%(name)s:%(message)s",
    )

    commands = {
        "status": cmd_status,
        "skills": cmd_skills,
        "add-skill": cmd_add_skill,
        "remove-skill": cmd_remove_skill,
        "create-requisition": cmd_create_requisition,
        "scan": cmd_scan,
        "show": cmd_show,
        "open-roles": cmd_open_roles,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    try:
        return handler(args)
    except (ScanError, FileNotFoundError, ValueError) as e:
        print(f"Failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
