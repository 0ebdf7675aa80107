from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path

from dotenv import load_dotenv

from lead_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from lead_import.db.postgres import PostgresLeadStore, connect
from lead_import.db.store import DryRunLeadStore, LeadStore
from lead_import.db.supabase_store import SupabaseLeadStore, create_supabase_client
from lead_import.excel.reader import FileParseError, read_lead_file
from lead_import.excel.template import TEMPLATE_FILE_NAME, write_template
from lead_import.logging.init import log_summary, setup_logging
from lead_import.models.columns import DEFAULT_MAPPING
from lead_import.models.config_models import ImportConfig
from lead_import.models.import_result import ImportOutcome, ImportStatus
from lead_import.services.permissions import ROLES, PermissionDeniedError, require_access
from lead_import.services.pipeline import run_import
from lead_import.services.reporter import headline, render_report, render_summary_line

"""CLI entrypoint.

    lead-import import FILE --operator-id ID [--role ROLE] [--config PATH] [--dry-run]
    lead-import template [OUTPUT]
    lead-import inspect FILE

Exit codes:
    0  every row imported (or a non-import command succeeded)
    2  rows rejected: partial import, or no row passed validation
    1  fatal: config, permission, unreadable file, batch rejected, DB connection
    3  empty input: the file has no data rows
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_EMPTY_INPUT = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so its connection settings win over the config file."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="lead-import", description="Bulk import of admission leads")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Validate a lead file and insert the valid rows")
    imp.add_argument("file", type=Path, help=".xlsx, .xls or .csv file, header in row 1")
    imp.add_argument("--operator-id", required=True, help="User id recorded as created_by")
    imp.add_argument(
        "--role",
        choices=ROLES,
        default=None,
        help="Operator role for dry-run (default admin); live runs read it from user_roles",
    )
    imp.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    imp.add_argument("--dry-run", action="store_true", help="Validate only, do not insert")

    tpl = sub.add_parser("template", help="Write the lead import template workbook")
    tpl.add_argument("output", nargs="?", type=Path, default=Path(TEMPLATE_FILE_NAME))

    ins = sub.add_parser("inspect", help="Print the header and first rows of a lead file")
    ins.add_argument("file", type=Path)
    return p.parse_args(argv)


@contextmanager
def _open_store(
    cfg: ImportConfig, dry_run: bool, role: str | None = None
) -> Iterator[tuple[LeadStore, str]]:
    if dry_run:
        yield DryRunLeadStore(role=role or "admin"), "dry-run"
    elif cfg.backend == "supabase":
        yield SupabaseLeadStore(create_supabase_client(cfg.supabase), cfg.table), "supabase"
    else:
        with connect(cfg.database) as conn:
            yield PostgresLeadStore(conn, cfg.table), "postgres"


def _exit_code(outcome: ImportOutcome) -> int:
    if outcome.status is ImportStatus.EMPTY_INPUT:
        return EXIT_EMPTY_INPUT
    if outcome.failure is not None:
        return EXIT_FATAL
    if outcome.status is ImportStatus.ALL_SUCCESS:
        return EXIT_SUCCESS_ALL
    return EXIT_PARTIAL_FAILURE


def _cmd_import(args: argparse.Namespace) -> int:
    logger = setup_logging()
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    # DISABLE_DB_CONNECT=1 forces dry-run (tests, local checks)
    dry_run = args.dry_run or os.getenv("DISABLE_DB_CONNECT") == "1"
    if args.role is not None and not dry_run:
        logger.warning("--role is ignored outside dry-run: the role comes from user_roles")

    with ExitStack() as stack:
        try:
            store, mode = stack.enter_context(_open_store(cfg, dry_run, args.role))
            role = store.fetch_role(args.operator_id)
            settings = store.fetch_permission_settings(args.operator_id, role)
        except Exception as e:
            logger.error(f"database: {e}")
            return EXIT_FATAL

        try:
            require_access(role, settings)
        except PermissionDeniedError as e:
            logger.error(f"permission: {e}")
            return EXIT_FATAL

        logger.info(f"Importing {args.file} mode={mode} table={cfg.table}")
        outcome = run_import(
            args.file,
            store,
            args.operator_id,
            initial_status=cfg.initial_status,
            null_sentinels=cfg.null_sentinels,
        )

    report = render_report(outcome, limit=cfg.error_display_limit)
    for line in report.splitlines():
        if outcome.failure is not None and line == headline(outcome):
            logger.error(line)
        elif outcome.is_empty:
            logger.warning(line)
        else:
            logger.info(line)

    summary_line = render_summary_line(outcome)
    log_summary(summary_line[len("SUMMARY "):])
    return _exit_code(outcome)


def _cmd_template(args: argparse.Namespace) -> int:
    logger = setup_logging()
    try:
        path = write_template(args.output)
    except (OSError, ValueError) as e:
        logger.error(f"template: {e}")
        return EXIT_FATAL
    logger.info(f"template written: {path}")
    return EXIT_SUCCESS_ALL


def _cmd_inspect(args: argparse.Namespace) -> int:
    logger = setup_logging()
    try:
        sheet = read_lead_file(args.file)
    except FileParseError as e:
        logger.error(f"inspect: {e}")
        return EXIT_FATAL
    known = set(DEFAULT_MAPPING.labels)
    print(f"FILE: {sheet.file_name} SHEET: {sheet.sheet_name} rows={len(sheet.rows)}")
    print(f"  columns={sheet.columns}")
    print(f"  unknown_columns={[c for c in sheet.columns if c not in known]}")
    print(f"  missing_columns={[c for c in DEFAULT_MAPPING.labels if c not in sheet.columns]}")
    for raw in sheet.rows[:3]:
        # dates are not JSON friendly: print isoformat
        safe = {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in raw.values.items()}
        print(f"  row {raw.row_number}: {safe}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an empty list from tests must not fall back to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")
    _load_env_file(Path(".env"), override=True)

    if args.command == "template":
        return _cmd_template(args)
    if args.command == "inspect":
        return _cmd_inspect(args)
    return _cmd_import(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
