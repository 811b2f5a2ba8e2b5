from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from cpace_estimator.config.loader import ConfigError, default_config, load_config, resolve_config_path
from cpace_estimator.errors import ColumnNotFoundError, ParseError, SheetNotFoundError
from cpace_estimator.excel.columns import infer_columns, suggest_columns
from cpace_estimator.excel.reader import get_sheet, read_workbook
from cpace_estimator.logging.error_log import ErrorLogBuffer
from cpace_estimator.logging.init import log_summary, set_debug, setup_logging
from cpace_estimator.models.config_models import AppConfig
from cpace_estimator.models.sheet import Sheet, Workbook
from cpace_estimator.rules.classifier import EligibilityClassifier
from cpace_estimator.rules.eligibility import ClassifierConfig
from cpace_estimator.services.analysis import analyze
from cpace_estimator.services.export import write_csv
from cpace_estimator.services.progress import WorkbookProgress
from cpace_estimator.services.summary import render_summary_line

"""CLI entrypoint.

Subcommands:
- inspect FILE...   sheets, headers, sample rows and inferred columns
- analyze FILE...   CPACE eligibility analysis per workbook (SUMMARY line, optional CSV / JSON)
- classify TEXT...  category + confidence for free-text descriptions

Exit codes: 0 all workbooks succeeded, 2 some failed, 1 fatal (config error
or every workbook failed).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


class WorkbookFailure(Exception):
    """A single workbook could not be analyzed (recorded, run continues)."""


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env (override=True: .env values win over the process environment)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="cpace-estimator", description="CPACE financing eligibility estimator")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", default=None, help="Config YAML (default: $CPACE_CONFIG or config/cpace.yml)")
    sub = p.add_subparsers(dest="command", required=True)

    ins = sub.add_parser("inspect", help="Print sheet headers, sample rows and inferred columns")
    ins.add_argument("files", nargs="+", type=Path)

    ana = sub.add_parser("analyze", help="Classify line items and total eligible costs")
    ana.add_argument("files", nargs="+", type=Path)
    ana.add_argument("--sheet", default=None, help="Sheet name (default: first sheet with inferable columns)")
    ana.add_argument("--description-column", default=None)
    ana.add_argument("--amount-column", default=None)
    ana.add_argument("--csv", action="store_true", help="Write <stem>-pace-analysis.csv per workbook")
    ana.add_argument("--output-dir", type=Path, default=None, help="CSV directory (default: config export.output_directory)")
    ana.add_argument("--json", action="store_true", help="Print the full result as JSON")

    cls = sub.add_parser("classify", help="Classify free-text line item descriptions")
    cls.add_argument("texts", nargs="+")
    return p.parse_args(argv)


def _load_app_config(explicit: str | None) -> AppConfig:
    path = resolve_config_path(explicit)
    if explicit is None and not path.exists():
        return default_config()
    return load_config(path)


def _read(path: Path, cfg: AppConfig) -> Workbook:
    return read_workbook(
        path,
        sample_rows=cfg.ingestion.sample_rows,
        header_scan_rows=cfg.ingestion.header_scan_rows,
        header_scan_columns=cfg.ingestion.header_scan_columns,
    )


def _inspect(files: list[Path], cfg: AppConfig) -> int:
    failures = 0
    for f in files:
        print(f"FILE: {f.name}")
        try:
            wb = _read(f, cfg)
        except ParseError as e:
            print(f"  read_error: {e}")
            failures += 1
            continue
        for sheet in wb.sheets:
            inference = infer_columns(sheet)
            print(f"  SHEET: {sheet.name} header_row={sheet.header_row_index + 1} rows={sheet.total_rows}")
            print(f"    cols={list(sheet.headers)}")
            print("    sample_rows=", [dict(r) for r in sheet.sample_rows[:3]])
            print(f"    inferred={inference.to_dict()}")
        for name, reason in wb.failed_sheets.items():
            print(f"  SHEET: {name} error={reason}")
    return _exit_code(len(files) - failures, failures)


def _choose_sheet(wb: Workbook, sheet_name: str | None, need_inference: bool) -> Sheet:
    if sheet_name is not None:
        return get_sheet(wb, sheet_name)
    if not wb.sheets:
        raise WorkbookFailure("workbook has no readable sheets")
    if need_inference:
        for sheet in wb.sheets:
            desc, amount = suggest_columns(infer_columns(sheet))
            if desc and amount:
                return sheet
    return wb.sheets[0]


def _choose_columns(sheet: Sheet, desc: str | None, amount: str | None) -> tuple[str, str]:
    logger = logging.getLogger(__name__)
    inference = infer_columns(sheet)
    s_desc, s_amount = suggest_columns(inference)
    if desc is None:
        if len(inference.description_columns) > 1:
            logger.warning(
                f"sheet '{sheet.name}': several description columns {inference.description_columns}, using '{s_desc}'"
            )
        desc = s_desc
    if amount is None:
        if len(inference.amount_columns) > 1:
            logger.warning(
                f"sheet '{sheet.name}': several amount columns {inference.amount_columns}, using '{s_amount}'"
            )
        amount = s_amount
    if desc is None or amount is None:
        raise WorkbookFailure(
            f"sheet '{sheet.name}': could not infer "
            f"{'description' if desc is None else 'amount'} column; pass it explicitly"
        )
    return desc, amount


def _analyze_one(
    path: Path,
    args: argparse.Namespace,
    cfg: AppConfig,
    classifier: EligibilityClassifier,
    error_log: ErrorLogBuffer,
) -> None:
    logger = logging.getLogger(__name__)
    try:
        wb = _read(path, cfg)
    except ParseError as e:
        error_log.record(path.name, "", "WORKBOOK_PARSE_ERROR", str(e))
        raise WorkbookFailure(str(e)) from e
    for name, reason in wb.failed_sheets.items():
        error_log.record(path.name, name, "SHEET_PARSE_ERROR", reason)

    need_inference = args.description_column is None or args.amount_column is None
    try:
        sheet = _choose_sheet(wb, args.sheet, need_inference)
    except SheetNotFoundError as e:
        error_log.record(path.name, e.sheet_name, "SHEET_NOT_FOUND", str(e))
        raise WorkbookFailure(str(e)) from e

    try:
        desc, amount = _choose_columns(sheet, args.description_column, args.amount_column)
    except WorkbookFailure as e:
        error_log.record(path.name, sheet.name, "COLUMN_NOT_INFERRED", str(e))
        raise

    logger.info(f"{path.name}: sheet='{sheet.name}' description='{desc}' amount='{amount}'")
    try:
        result = analyze(sheet, desc, amount, classifier=classifier)
    except ColumnNotFoundError as e:
        error_log.record(path.name, sheet.name, "COLUMN_NOT_FOUND", str(e))
        raise WorkbookFailure(str(e)) from e

    log_summary(render_summary_line(result)[len("SUMMARY "):])
    if args.json:
        print(json.dumps({"file": path.name, "sheet": sheet.name, **result.to_dict()}, ensure_ascii=False))
    if args.csv:
        out_dir = args.output_dir or Path(cfg.export.output_directory)
        out = write_csv(result, out_dir / f"{path.stem}-pace-analysis.csv")
        logger.info(f"csv written: {out}")


def _analyze(args: argparse.Namespace, cfg: AppConfig) -> int:
    logger = logging.getLogger(__name__)
    classifier = EligibilityClassifier(ClassifierConfig.from_settings(cfg.classifier))
    error_log = ErrorLogBuffer()
    with WorkbookProgress(len(args.files)) as progress:
        for path in args.files:
            progress.start(path)
            try:
                _analyze_one(path, args, cfg, classifier, error_log)
            except WorkbookFailure as e:
                logger.error(f"{path.name}: {e}")
                progress.finish(success=False)
            else:
                progress.finish(success=True)
    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")
    return _exit_code(progress.succeeded, progress.failed)


def _classify(texts: list[str], cfg: AppConfig) -> int:
    classifier = EligibilityClassifier(ClassifierConfig.from_settings(cfg.classifier))
    for text in texts:
        c = classifier.classify(text)
        info = classifier.eligibility_info(c.category)
        print(f"{c.category.value}\t{c.confidence:.2f}\t{info.percentage:.0%}\t{text}")
    return EXIT_SUCCESS_ALL


def _exit_code(succeeded: int, failed: int) -> int:
    if failed == 0:
        return EXIT_SUCCESS_ALL
    if succeeded == 0:
        return EXIT_FATAL
    return EXIT_PARTIAL_FAILURE


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストからの明示呼び出し)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = _load_app_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "inspect":
        return _inspect(args.files, cfg)
    if args.command == "classify":
        return _classify(args.texts, cfg)
    return _analyze(args, cfg)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
