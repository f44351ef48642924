"""Command-line interface for the careshift analytics engine."""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from careshift.analytics.engine import AnalyticsEngine, DashboardSnapshot
from careshift.domain.models import (
    AnalyticsConfig,
    AppointmentRecord,
    ReminderRecord,
    ShiftRecord,
    ShiftStatus,
    StaffEarningsInput,
)
from careshift.exceptions import CareshiftError
from careshift.output.pdf_generator import PDFGenerator
from careshift.output.text_report import TextReportGenerator
from careshift.sources import InMemoryRecordSource, JsonRecordSource, OrganizationRecords

logger = logging.getLogger(__name__)

DEMO_ORG_ID = "org-demo"


def parse_now(value: str) -> datetime:
    """Parse the --now argument (ISO date or datetime)."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"--now must be an ISO date or datetime, got {value!r}")


def load_config(path: Optional[str]) -> AnalyticsConfig:
    """Load engine configuration from a JSON file, or use the defaults."""
    if not path:
        return AnalyticsConfig()
    with open(path, encoding="utf-8") as f:
        return AnalyticsConfig.from_dict(json.load(f))


def create_sample_records(now: datetime, staff_count: int = 6) -> OrganizationRecords:
    """Create sample records around a reference date.

    Args:
        now: Reference time the sample data is centered on.
        staff_count: Number of staff members to create.
    """
    today = now.date()

    names = [
        "Alice Moore", "Ben Carter", "Chloe Evans", "David Hall", "Emma Price",
        "Finn Wright", "Grace Lee", "Hugo Bell", "Iris Stone", "Jack Reed",
    ]
    staff = [
        StaffEarningsInput(
            staff_member_id=f"S{i + 1:03d}",
            display_name=names[i % len(names)],
            hourly_rate=18.0 + (i % 4) * 2.5,
        )
        for i in range(staff_count)
    ]

    start_times = ["07:00", "08:00", "09:00", "09:00", "14:00", "18:00"]
    statuses = [
        ShiftStatus.COMPLETED,
        ShiftStatus.COMPLETED,
        ShiftStatus.COMPLETED,
        ShiftStatus.CANCELLED,
        ShiftStatus.COMPLETED,
        ShiftStatus.NO_SHOW,
    ]

    shifts = []
    for day_offset in range(-14, 8):
        shift_date = today + timedelta(days=day_offset)
        for i in range(staff_count):
            # Not everyone works every day
            if (i + day_offset) % 3 == 0:
                continue
            start = start_times[(i + day_offset) % len(start_times)]
            start_hour = int(start[:2])
            if day_offset < 0:
                status = statuses[(i * 7 + day_offset) % len(statuses)]
            else:
                status = ShiftStatus.CONFIRMED if i % 2 else ShiftStatus.SCHEDULED
            shifts.append(ShiftRecord(
                id=f"SH-{shift_date.isoformat()}-{i + 1}",
                organization_id=DEMO_ORG_ID,
                staff_member_id=staff[i].staff_member_id if i % 5 != 4 else None,
                client_id=f"C{(i + day_offset) % 8 + 1:03d}",
                shift_date=shift_date,
                start_time=start,
                end_time=f"{min(start_hour + 8, 23):02d}:00",
                break_minutes=30 if i % 2 == 0 else 60,
                status=status.value,
            ))

    services = ["Home Care", "Wound Care", "Medication Review", None]
    appointments = []
    for n in range(40):
        appt_date = today - timedelta(days=n * 4)
        appointments.append(AppointmentRecord(
            id=f"AP{n + 1:03d}",
            organization_id=DEMO_ORG_ID,
            client_id=f"C{n % 8 + 1:03d}",
            appointment_date=appt_date,
            total_cost=60.0 + (n % 5) * 25.0,
            payment_status="paid" if n % 4 != 3 else "pending",
            service_type=services[n % len(services)],
            hourly_rate=25.0 + (n % 3) * 5.0 if n % 6 != 5 else None,
        ))

    reminders = []
    priorities = ["low", "medium", "high", "urgent"]
    for n in range(10):
        reminders.append(ReminderRecord(
            id=f"R{n + 1:03d}",
            client_id=f"C{n % 8 + 1:03d}",
            title=f"Follow-up visit {n + 1}",
            reminder_date=today + timedelta(days=n * 2 - 5),
            reminder_time=f"{9 + n % 8:02d}:30" if n % 3 else None,
            priority=priorities[n % len(priorities)],
        ))

    return OrganizationRecords(
        shifts=shifts,
        appointments=appointments,
        reminders=reminders,
        staff=staff,
    )


def emit_snapshot(
    snapshot: DashboardSnapshot,
    as_json: bool = False,
    text_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> None:
    """Print a snapshot and write any requested report files."""
    if as_json:
        print(json.dumps(snapshot.to_dict(), indent=2))
    else:
        print(TextReportGenerator().generate_to_string(snapshot))

    if text_path:
        TextReportGenerator().generate(snapshot, text_path)
        print(f"Text report written to {text_path}", file=sys.stderr)

    if pdf_path:
        PDFGenerator().generate(snapshot, pdf_path)
        print(f"PDF report written to {pdf_path}", file=sys.stderr)


def run_analytics(
    input_path: str,
    now: datetime,
    organization_id: Optional[str] = None,
    config: Optional[AnalyticsConfig] = None,
    as_json: bool = False,
    text_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> int:
    """Compute analytics for records stored in a JSON file."""
    source = JsonRecordSource.from_file(input_path)
    org_ids = [organization_id] if organization_id else source.organization_ids
    if not org_ids:
        print("No organizations found in input.", file=sys.stderr)
        return 1
    if len(org_ids) > 1 and (text_path or pdf_path):
        print("Select one organization with --org to write report files.", file=sys.stderr)
        return 1

    engine = AnalyticsEngine(config)
    for org_id in org_ids:
        snapshot = engine.build_for_organization(source, org_id, now)
        emit_snapshot(snapshot, as_json, text_path, pdf_path)
    return 0


def run_demo(
    now: datetime,
    staff_count: int = 6,
    config: Optional[AnalyticsConfig] = None,
    as_json: bool = False,
    text_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> int:
    """Compute analytics over generated sample records."""
    logger.info("Generating demo records for %d staff members", staff_count)
    source = InMemoryRecordSource({DEMO_ORG_ID: create_sample_records(now, staff_count)})
    snapshot = AnalyticsEngine(config).build_for_organization(source, DEMO_ORG_ID, now)
    emit_snapshot(snapshot, as_json, text_path, pdf_path)
    return 0


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--now", "-n",
        type=parse_now,
        required=True,
        help="Reference time as an ISO date or datetime (required for reproducible output)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="JSON file with engine settings (window_months, top_k, ...)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the snapshot as JSON instead of a text report",
    )
    parser.add_argument(
        "--text",
        type=str,
        help="Also write the text report to this path",
    )
    parser.add_argument(
        "--pdf",
        type=str,
        help="Also write a PDF report to this path",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output, including skipped records",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="careshift",
        description="careshift - Shift aggregation and dashboard analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s analytics -i records.json --now 2024-06-10          Text report
  %(prog)s analytics -i records.json --now 2024-06-10 --json   JSON output
  %(prog)s analytics -i records.json --now 2024-06-10 --org org-1 --pdf dash.pdf

  %(prog)s demo --now 2024-06-10                 Sample data report
  %(prog)s demo --now 2024-06-10 --staff 10      Sample data for 10 staff
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    analytics_parser = subparsers.add_parser(
        "analytics",
        help="Compute dashboard analytics from a JSON records file",
    )
    analytics_parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="JSON file with shifts, appointments, reminders and staff",
    )
    analytics_parser.add_argument(
        "--org", "-o",
        type=str,
        help="Organization ID (default: every organization in the file)",
    )
    _add_output_arguments(analytics_parser)

    demo_parser = subparsers.add_parser("demo", help="Compute analytics over sample records")
    demo_parser.add_argument(
        "--staff", "-s",
        type=int,
        default=6,
        help="Number of staff members to generate (default: 6)",
    )
    _add_output_arguments(demo_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command not in ("analytics", "demo"):
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        if args.command == "analytics":
            if not Path(args.input).exists():
                print(f"Input file not found: {args.input}", file=sys.stderr)
                return 1
            return run_analytics(
                args.input,
                args.now,
                organization_id=args.org,
                config=config,
                as_json=args.json,
                text_path=args.text,
                pdf_path=args.pdf,
            )
        return run_demo(
            args.now,
            staff_count=args.staff,
            config=config,
            as_json=args.json,
            text_path=args.text,
            pdf_path=args.pdf,
        )
    except (CareshiftError, ValueError, OSError, ImportError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
