import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import StoreConfig
from .db import Database, connect
from .env import load_env
from .errors import ConfigError, JobBoardError, NotFoundError, ValidationError
from .functions import (
    create_application,
    create_job,
    get_job,
    get_job_count,
    list_jobs,
)
from .logger import get_logger
from .schema import validate_application, validate_job
from .search import filter_jobs

logger = get_logger()

COUNT_REFRESH_SECONDS = 5.0


def _positive_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return seconds


def _read_json(path_str: str):
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Input file is not valid JSON: {e}")


def _print_field_errors(e: ValidationError) -> None:
    for err in e.errors:
        print(f" - {err.field}: {err.message}")


def _print_job(job: dict, full: bool = False) -> None:
    print(f"ID: {job['id']}")
    print(f"  Title: {job['title']}")
    print(f"  Contact: {job['contact']}")
    print(f"  Posted: {job['createdAt']}")
    if full:
        print()
        print(job["description"])


def cmd_count(args: argparse.Namespace, db: Database) -> None:
    if not args.watch:
        try:
            print(get_job_count(db)["count"])
        except JobBoardError as e:
            logger.error("Failed to fetch job count", error=str(e))
            raise SystemExit("Failed to fetch job count. Please try again.")
        return

    # Fixed interval, no backoff; a failed refresh keeps the last value shown.
    remaining = args.times
    while remaining is None or remaining > 0:
        try:
            print(get_job_count(db)["count"], flush=True)
        except JobBoardError as e:
            logger.error("Failed to fetch job count", error=str(e))
        if remaining is not None:
            remaining -= 1
            if remaining == 0:
                break
        time.sleep(args.interval)


def cmd_list(args: argparse.Namespace, db: Database) -> None:
    try:
        jobs = list_jobs(db)["jobs"]
    except JobBoardError as e:
        logger.error("Failed to fetch jobs", error=str(e))
        raise SystemExit("Failed to fetch jobs. Please try again.")

    jobs = filter_jobs(jobs, args.search or "")
    if args.json:
        print(json.dumps({"jobs": jobs}, indent=2, ensure_ascii=False))
        return
    if not jobs:
        print("No jobs match your search" if args.search else "No jobs posted yet")
        return
    print(f"Found {len(jobs)} jobs:\n")
    for job in jobs:
        _print_job(job)
        print()


def cmd_show(args: argparse.Namespace, db: Database) -> None:
    try:
        job = get_job(db, {"id": args.id})["job"]
    except ValidationError as e:
        print("Invalid:")
        _print_field_errors(e)
        raise SystemExit(2)
    except NotFoundError:
        raise SystemExit(f"Job not found: {args.id}")
    except JobBoardError as e:
        logger.error("Failed to fetch job", id=args.id, error=str(e))
        raise SystemExit("Failed to fetch job. Please try again.")
    if args.json:
        print(json.dumps({"job": job}, indent=2, ensure_ascii=False))
        return
    _print_job(job, full=True)


def cmd_post(args: argparse.Namespace, db: Database) -> None:
    data = {"title": args.title, "description": args.description, "contact": args.contact}
    try:
        job = create_job(db, data, jwt=args.jwt)["job"]
    except ValidationError as e:
        print("Invalid:")
        _print_field_errors(e)
        raise SystemExit(2)
    except JobBoardError as e:
        logger.error("Failed to post job", error=str(e))
        raise SystemExit("Failed to post job. Please try again.")
    print("Job posted successfully!")
    print(f"ID: {job['id']}")


def cmd_apply(args: argparse.Namespace, db: Database) -> None:
    message = args.message.strip() if args.message else ""
    data = {
        "jobId": args.job_id,
        "applicantName": args.name,
        "applicantContact": args.contact,
        "message": message or None,
    }
    try:
        application = create_application(db, data, jwt=args.jwt)["application"]
    except ValidationError as e:
        print("Invalid:")
        _print_field_errors(e)
        raise SystemExit(2)
    except JobBoardError as e:
        logger.error("Failed to submit application", job_id=args.job_id, error=str(e))
        raise SystemExit("Failed to submit application. Please try again.")
    print("Application submitted successfully!")
    print(f"ID: {application['id']}")


def cmd_validate(args: argparse.Namespace) -> None:
    data = _read_json(args.input)
    if not isinstance(data, dict):
        raise SystemExit("Input must be a JSON object")
    errors = validate_job(data) if args.kind == "job" else validate_application(data)
    if errors:
        print("Invalid:")
        for err in errors:
            print(f" - {err.field}: {err.message}")
        raise SystemExit(2)
    print("Valid")


def cmd_import(args: argparse.Namespace, db: Database) -> None:
    postings = _read_json(args.input)
    if isinstance(postings, dict):
        postings = postings.get("jobs", [])
    if not isinstance(postings, list):
        raise SystemExit("Input must be a list of jobs or {\"jobs\": [...]}")

    posted = invalid = failed = 0
    for i, posting in enumerate(postings):
        try:
            job = create_job(db, posting, jwt=args.jwt)["job"]
        except ValidationError as e:
            print(f"[invalid] #{i} {', '.join(e.fields)}")
            invalid += 1
            continue
        except JobBoardError as e:
            print(f"[error] #{i} -> {e}")
            failed += 1
            continue
        posted += 1
        print(f"[posted] {job['id']} {job['title']}")
    print(f"Done. total={len(postings)} posted={posted} invalid={invalid} failed={failed}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board: browse, post and apply")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--verbose", action="store_true", help="Log a metrics summary on exit")

    subparsers = parser.add_subparsers(dest="command")

    cnt = subparsers.add_parser("count", help="Show the number of posted jobs")
    cnt.add_argument("--watch", action="store_true", help="Keep refreshing on a fixed interval")
    cnt.add_argument("--interval", type=_positive_seconds, default=COUNT_REFRESH_SECONDS, help="Refresh interval in seconds (default 5)")
    cnt.add_argument("--times", type=int, help="Stop after this many refreshes (default: run until interrupted)")
    cnt.set_defaults(func=cmd_count)

    lst = subparsers.add_parser("list", help="List the newest jobs (up to 100)")
    lst.add_argument("--search", help="Case-insensitive filter on job title")
    lst.add_argument("--json", action="store_true", help="Print JSON")
    lst.set_defaults(func=cmd_list)

    shw = subparsers.add_parser("show", help="Show one job")
    shw.add_argument("--id", required=True, help="Job id")
    shw.add_argument("--json", action="store_true", help="Print JSON")
    shw.set_defaults(func=cmd_show)

    pst = subparsers.add_parser("post", help="Post a job")
    pst.add_argument("--title", required=True, help="Job title (1-200 chars)")
    pst.add_argument("--description", required=True, help="Description (1-5000 chars)")
    pst.add_argument("--contact", required=True, help="Email, handle or phone (1-500 chars)")
    pst.add_argument("--jwt", default=os.getenv("JOBBOARD_JWT"), help="Signed-in user token (or set JOBBOARD_JWT)")
    pst.set_defaults(func=cmd_post)

    apl = subparsers.add_parser("apply", help="Apply to a job")
    apl.add_argument("--job-id", required=True, help="Job id")
    apl.add_argument("--name", required=True, help="Your name (1-200 chars)")
    apl.add_argument("--contact", required=True, help="How to reach you (1-500 chars)")
    apl.add_argument("--message", help="Optional message (up to 2000 chars)")
    apl.add_argument("--jwt", default=os.getenv("JOBBOARD_JWT"), help="Signed-in user token (or set JOBBOARD_JWT)")
    apl.set_defaults(func=cmd_apply)

    val = subparsers.add_parser("validate", help="Validate a job or application JSON file without posting")
    val.add_argument("--input", required=True, help="Path to JSON input")
    val.add_argument("--kind", choices=["job", "application"], default="job", help="Payload kind (default: job)")
    val.set_defaults(func=cmd_validate, offline=True)

    imp = subparsers.add_parser("import", help="Post every job from a JSON file")
    imp.add_argument("--input", required=True, help="JSON list of {title, description, contact}")
    imp.add_argument("--jwt", default=os.getenv("JOBBOARD_JWT"), help="Signed-in user token (or set JOBBOARD_JWT)")
    imp.set_defaults(func=cmd_import)

    return parser


def main(argv: Optional[List[str]] = None, db: Optional[Database] = None) -> None:
    # Load .env if present (APPWRITE_ENDPOINT, APPWRITE_PROJECT_ID, ...)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        if getattr(args, "offline", False):
            args.func(args)
            return

        if db is None:
            try:
                db = connect(StoreConfig.from_env())
            except ConfigError as e:
                logger.critical("Startup failed", error=str(e))
                raise SystemExit(str(e))
        try:
            args.func(args, db)
        except KeyboardInterrupt:
            print(file=sys.stderr)
    finally:
        if args.verbose:
            logger.log_metrics_summary()


if __name__ == "__main__":
    main()
