"""List commands for each Deel resource."""

import argparse
from typing import TYPE_CHECKING

from .commands import CursorListConfig, add_cursor_list_command, non_empty
from .exceptions import LegalEntityNotFoundError
from .models import Contract

if TYPE_CHECKING:
    from .client import DeelClient


def _money(amount: float, currency: str) -> str:
    return f"{amount:.2f} {currency}".strip()


def _or_dash(value: str) -> str:
    return value or "-"


# --- contracts ---


def _contract_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status (server-side)")
    parser.add_argument("--type", default="", help="Filter by contract type (server-side)")
    parser.add_argument("--country", default="", help="Only contracts whose worker is in this country")
    parser.add_argument("--entity", default="", help="Only contracts of this legal entity (ID or name)")


def _filter_by_entity(client: "DeelClient", items: list[Contract], entity: str) -> list[Contract]:
    wanted = entity.lower()
    if any(c.entity_id for c in items):
        return [c for c in items if wanted in (c.entity_id.lower(), c.entity.lower())]
    # No contract carries an entity ID; resolve the entity and match on its name
    for legal_entity in client.list_legal_entities():
        if wanted in (legal_entity.id.lower(), legal_entity.name.lower()):
            return [c for c in items if c.entity == legal_entity.name]
    raise LegalEntityNotFoundError(entity)


def _filter_contracts(
    client: "DeelClient", items: list[Contract], args: argparse.Namespace
) -> list[Contract]:
    if args.entity and items:
        items = _filter_by_entity(client, items, args.entity)
    if args.country:
        items = [c for c in items if c.country.lower() == args.country.lower()]
    return items


CONTRACTS_LIST = CursorListConfig(
    name="list",
    help="List contracts",
    operation="listing contracts",
    fetch=lambda client, args, cursor, limit: client.list_contracts(
        cursor=cursor, limit=limit, status=args.status, type=args.type
    ),
    headers=["ID", "TITLE", "WORKER", "ENTITY", "ENTITY ID", "TYPE", "STATUS"],
    row=lambda c: [c.id, c.title, c.worker_name, c.entity, _or_dash(c.entity_id), c.type, c.status],
    empty_message="No contracts found.",
    add_arguments=_contract_arguments,
    filter_items=_filter_contracts,
    epilog="examples:\n  deel contracts list --status active\n  deel contracts list --country TW --all",
)

# --- people ---

PEOPLE_LIST = CursorListConfig(
    name="list",
    help="List people in the organization",
    operation="listing people",
    fetch=lambda client, args, cursor, limit: client.list_people(cursor=cursor, limit=limit),
    headers=["ID", "NAME", "EMAIL", "JOB TITLE", "STATUS"],
    row=lambda p: [p.id, p.name, p.email, p.job_title, p.status],
    empty_message="No people found.",
)

# --- teams ---

TEAMS_LIST = CursorListConfig(
    name="list",
    help="List teams",
    operation="listing teams",
    fetch=lambda client, args, cursor, limit: client.list_teams(cursor=cursor, limit=limit),
    headers=["ID", "NAME", "MANAGER", "MEMBERS"],
    row=lambda t: [t.id, t.name, t.manager_name, str(t.member_count)],
    empty_message="No teams found.",
)

# --- timesheets ---


def _contract_status_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--contract-id", default="", help="Filter by contract")
    parser.add_argument("--status", default="", help="Filter by status")


TIMESHEETS_LIST = CursorListConfig(
    name="list",
    help="List timesheets",
    operation="listing timesheets",
    fetch=lambda client, args, cursor, limit: client.list_timesheets(
        cursor=cursor, limit=limit, contract_id=args.contract_id, status=args.status
    ),
    headers=["ID", "CONTRACT ID", "STATUS", "PERIOD", "TOTAL HOURS", "CREATED"],
    row=lambda ts: [
        ts.id,
        ts.contract_id,
        ts.status,
        f"{ts.period_start} to {ts.period_end}",
        f"{ts.total_hours:.2f}",
        ts.created_at,
    ],
    empty_message="No timesheets found.",
    add_arguments=_contract_status_arguments,
)

# --- payments ---

OFF_CYCLE_PAYMENTS_LIST = CursorListConfig(
    name="off-cycle",
    help="List off-cycle payments",
    operation="listing off-cycle payments",
    fetch=lambda client, args, cursor, limit: client.list_off_cycle_payments(
        cursor=cursor, limit=limit, contract_id=args.contract_id, status=args.status
    ),
    headers=["ID", "WORKER", "TYPE", "AMOUNT", "STATUS", "DATE"],
    row=lambda p: [
        p.id,
        p.worker_name,
        p.type,
        _money(p.amount, p.currency),
        p.status,
        p.payment_date,
    ],
    empty_message="No off-cycle payments found.",
    default_limit=50,
    add_arguments=_contract_status_arguments,
)


def _receipt_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--contract-id", default="", help="Filter by contract")
    parser.add_argument("--payment-id", default="", help="Filter by payment")


PAYMENT_RECEIPTS_LIST = CursorListConfig(
    name="receipts",
    help="List detailed payment receipts",
    operation="listing payment receipts",
    fetch=lambda client, args, cursor, limit: client.list_payment_receipts(
        cursor=cursor, limit=limit, contract_id=args.contract_id, payment_id=args.payment_id
    ),
    headers=["ID", "PAYMENT ID", "WORKER", "AMOUNT", "ISSUE DATE"],
    row=lambda r: [r.id, r.payment_id, r.worker_name, _money(r.amount, r.currency), r.issue_date],
    empty_message="No payment receipts found.",
    default_limit=50,
    add_arguments=_receipt_arguments,
)

# --- IT assets ---


def _asset_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status")
    parser.add_argument("--type", default="", help="Filter by asset type")


IT_ASSETS_LIST = CursorListConfig(
    name="assets",
    help="List IT assets",
    operation="listing IT assets",
    fetch=lambda client, args, cursor, limit: client.list_it_assets(
        cursor=cursor, limit=limit, status=args.status, type=args.type
    ),
    headers=["ID", "NAME", "TYPE", "SERIAL", "STATUS", "ASSIGNED TO"],
    row=lambda a: [a.id, a.name, a.type, a.serial_number, a.status, _or_dash(a.assigned_to)],
    empty_message="No IT assets found.",
    add_arguments=_asset_arguments,
)

# --- onboarding ---


def _status_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status")


ONBOARDING_LIST = CursorListConfig(
    name="list",
    help="List employees in onboarding",
    operation="listing onboarding employees",
    fetch=lambda client, args, cursor, limit: client.list_onboarding_employees(
        cursor=cursor, limit=limit, status=args.status
    ),
    headers=["ID", "NAME", "COUNTRY", "STATUS", "STAGE", "PROGRESS"],
    row=lambda e: [e.id, e.name, e.country, e.status, e.stage, f"{e.progress}%"],
    empty_message="No employees in onboarding.",
    add_arguments=_status_argument,
)

# --- tasks ---


def _task_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--contract-id", type=non_empty, required=True, help="Contract whose tasks to list"
    )
    parser.add_argument("--status", default="", help="Filter by status")


TASKS_LIST = CursorListConfig(
    name="list",
    help="List tasks of a contract",
    operation="listing tasks",
    fetch=lambda client, args, cursor, limit: client.list_tasks(
        args.contract_id, cursor=cursor, limit=limit, status=args.status
    ),
    headers=["ID", "TITLE", "AMOUNT", "STATUS", "CREATED"],
    row=lambda t: [t.id, t.title, _money(t.amount, t.currency), t.status, t.created_at],
    empty_message="No tasks found.",
    add_arguments=_task_arguments,
)

# --- ATS ---


def _ats_offer_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status")


ATS_OFFERS_LIST = CursorListConfig(
    name="offers",
    help="List ATS offers",
    operation="listing ats offers",
    fetch=lambda client, args, cursor, limit: client.list_ats_offers(
        cursor=cursor, limit=limit, status=args.status
    ),
    headers=["ID", "CANDIDATE", "POSITION", "SALARY", "STATUS"],
    row=lambda o: [o.id, o.candidate, o.position, _money(o.salary, o.currency), o.status],
    empty_message="No offers found.",
    add_arguments=_ats_offer_arguments,
)


def _ats_job_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status")
    parser.add_argument("--department-id", default="", help="Filter by department ID")
    parser.add_argument("--location-id", default="", help="Filter by location ID")


ATS_JOBS_LIST = CursorListConfig(
    name="jobs",
    help="List ATS jobs",
    operation="listing ats jobs",
    fetch=lambda client, args, cursor, limit: client.list_ats_jobs(
        cursor=cursor,
        limit=limit,
        status=args.status,
        department_id=args.department_id,
        location_id=args.location_id,
    ),
    headers=["ID", "TITLE", "DEPARTMENT", "LOCATION", "TYPE", "STATUS"],
    row=lambda j: [j.id, j.title, j.department, j.location, j.employment_type, j.status],
    empty_message="No jobs found.",
    add_arguments=_ats_job_arguments,
)


def _ats_posting_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status")
    parser.add_argument("--job-id", default="", help="Filter by job ID")


ATS_POSTINGS_LIST = CursorListConfig(
    name="postings",
    help="List job postings",
    operation="listing ats job postings",
    fetch=lambda client, args, cursor, limit: client.list_ats_job_postings(
        cursor=cursor, limit=limit, status=args.status, job_id=args.job_id
    ),
    headers=["ID", "TITLE", "DEPARTMENT", "LOCATION", "STATUS", "POSTED AT"],
    row=lambda p: [p.id, p.title, p.department, p.location, p.status, p.posted_at],
    empty_message="No job postings found.",
    add_arguments=_ats_posting_arguments,
)


def _ats_application_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", default="", help="Filter by status")
    parser.add_argument("--job-id", default="", help="Filter by job ID")
    parser.add_argument("--candidate-id", default="", help="Filter by candidate ID")
    parser.add_argument("--stage", default="", help="Filter by stage")


ATS_APPLICATIONS_LIST = CursorListConfig(
    name="applications",
    help="List applications",
    operation="listing ats applications",
    fetch=lambda client, args, cursor, limit: client.list_ats_applications(
        cursor=cursor,
        limit=limit,
        status=args.status,
        job_id=args.job_id,
        candidate_id=args.candidate_id,
        stage=args.stage,
    ),
    headers=["ID", "CANDIDATE", "JOB", "STATUS", "STAGE", "APPLIED AT"],
    row=lambda a: [a.id, a.candidate_name, a.job_title, a.status, a.stage, a.applied_at],
    empty_message="No applications found.",
    add_arguments=_ats_application_arguments,
)


def _ats_candidate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default="", help="Search candidates by name or email")


ATS_CANDIDATES_LIST = CursorListConfig(
    name="candidates",
    help="List candidates",
    operation="listing ats candidates",
    fetch=lambda client, args, cursor, limit: client.list_ats_candidates(
        cursor=cursor, limit=limit, search=args.search
    ),
    headers=["ID", "NAME", "EMAIL", "PHONE", "LOCATION"],
    row=lambda c: [c.id, c.name, c.email, c.phone, c.location],
    empty_message="No candidates found.",
    add_arguments=_ats_candidate_arguments,
)

ATS_DEPARTMENTS_LIST = CursorListConfig(
    name="departments",
    help="List departments",
    operation="listing ats departments",
    fetch=lambda client, args, cursor, limit: client.list_ats_departments(
        cursor=cursor, limit=limit
    ),
    headers=["ID", "NAME", "PARENT ID", "CREATED AT"],
    row=lambda d: [d.id, d.name, d.parent_id, d.created_at],
    empty_message="No departments found.",
)


def _ats_location_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--remote",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only remote (--remote) or on-site (--no-remote) locations",
    )


ATS_LOCATIONS_LIST = CursorListConfig(
    name="locations",
    help="List locations",
    operation="listing ats locations",
    fetch=lambda client, args, cursor, limit: client.list_ats_locations(
        cursor=cursor, limit=limit, remote=args.remote
    ),
    headers=["ID", "NAME", "CITY", "COUNTRY", "REMOTE"],
    row=lambda loc: [loc.id, loc.name, loc.city, loc.country, "Yes" if loc.remote else "No"],
    empty_message="No locations found.",
    add_arguments=_ats_location_arguments,
)

# resource group -> (help, list commands)
RESOURCE_GROUPS: dict[str, tuple[str, list[CursorListConfig]]] = {
    "contracts": ("Manage contracts", [CONTRACTS_LIST]),
    "people": ("Manage people", [PEOPLE_LIST]),
    "teams": ("Manage teams", [TEAMS_LIST]),
    "timesheets": ("Manage timesheets", [TIMESHEETS_LIST]),
    "payments": ("Off-cycle payments and receipts", [OFF_CYCLE_PAYMENTS_LIST, PAYMENT_RECEIPTS_LIST]),
    "it": ("IT equipment", [IT_ASSETS_LIST]),
    "onboarding": ("Employee onboarding", [ONBOARDING_LIST]),
    "tasks": ("Contract tasks", [TASKS_LIST]),
    "ats": (
        "Applicant tracking system",
        [
            ATS_OFFERS_LIST,
            ATS_JOBS_LIST,
            ATS_POSTINGS_LIST,
            ATS_APPLICATIONS_LIST,
            ATS_CANDIDATES_LIST,
            ATS_DEPARTMENTS_LIST,
            ATS_LOCATIONS_LIST,
        ],
    ),
}


def register_commands(
    subparsers: "argparse._SubParsersAction[argparse.ArgumentParser]",
) -> None:
    """Adds every resource group and its list commands to the root parser."""
    for group, (help_text, configs) in RESOURCE_GROUPS.items():
        group_parser = subparsers.add_parser(group, help=help_text, description=help_text)
        actions = group_parser.add_subparsers(dest="action", metavar="<action>")
        actions.required = True
        for config in configs:
            add_cursor_list_command(actions, config)
