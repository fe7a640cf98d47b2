"""Action Center CLI - task triage from the terminal."""

import json
import logging
import sys
from contextlib import contextmanager
from datetime import date

import click

from .adapters.clock import FixedClock, SystemClock
from .adapters.sqlite_store import SQLiteStore
from .config import load_config
from .core.errors import ActionCenterError, StorageError
from .core.projects import Project
from .core.tasks import VALID_STATUSES, Task, TaskStatus
from .core.triage import SCHEDULED_ORDERS, Bucket
from .service import UNSET, TriageService

logger = logging.getLogger(__name__)

BUCKET_TITLES = {
    Bucket.OVERDUE: "Overdue",
    Bucket.DUE_TODAY: "Due today",
    Bucket.UPCOMING: "Upcoming (next 6 days)",
    Bucket.SCHEDULED: "Scheduled",
    Bucket.UNSCHEDULED: "Unscheduled",
    Bucket.COMPLETED: "Completed",
}


def _service(ctx: click.Context) -> TriageService:
    """Wire the store, clock and registry from config."""
    config = load_config()
    as_of = ctx.obj.get("as_of")
    clock = FixedClock(as_of) if as_of else SystemClock(config.timezone)
    store = SQLiteStore(config.database)
    return TriageService(store, clock, scheduled_order=config.scheduled_sort)


@contextmanager
def _handle_errors():
    """Print domain errors and exit non-zero."""
    try:
        yield
    except StorageError as e:
        logger.error(f"Storage failure: {e.__cause__ or e}")
        click.echo("Error: something went wrong talking to the task database.", err=True)
        sys.exit(1)
    except ActionCenterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _task_dict(t: Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "notes": t.notes,
        "project": t.project,
        "status": t.status.value,
        "due_date": t.due_date.isoformat() if t.due_date else None,
        "snoozed_until": t.snoozed_until.isoformat() if t.snoozed_until else None,
        "source": t.source.value,
        "created_at": t.created_at.isoformat(),
        "updated_at": t.updated_at.isoformat(),
    }


def _project_dict(p: Project) -> dict:
    return {"id": p.id, "name": p.name, "task_count": p.task_count}


def _format_task(t: Task) -> str:
    due = f" (due {t.due_date})" if t.due_date else ""
    snooze = ""
    if t.status == TaskStatus.SNOOZED and t.snoozed_until:
        snooze = f" [snoozed until {t.snoozed_until}]"
    return f"[{t.id[:8]}] {t.title} - {t.project} - {t.status.value}{due}{snooze}"


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Pretend today is this date (YYYY-MM-DD)")
@click.pass_context
def main(ctx, debug: bool, as_of):
    """Action Center - personal task triage."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    ctx.obj["as_of"] = as_of.date() if as_of else None


@main.command()
@click.option("--sort", "scheduled_order", type=click.Choice(SCHEDULED_ORDERS), default=None,
              help="Order of scheduled tasks by due date")
@click.option("--completed-on", default=None, help="Only show tasks completed on this date")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def triage(ctx, scheduled_order: str | None, completed_on: str | None, as_json: bool):
    """Show tasks grouped into triage buckets."""
    with _handle_errors():
        buckets = _service(ctx).triage(scheduled_order, completed_on)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "today": buckets.today.isoformat(),
                    **{b.value: [_task_dict(t) for t in buckets.get(b)] for b in Bucket},
                },
                indent=2,
            )
        )
        return

    click.echo(f"Triage for {buckets.today.strftime('%A, %B %d, %Y')}")
    for bucket, title in BUCKET_TITLES.items():
        tasks = buckets.get(bucket)
        click.echo(f"\n### {title} ({len(tasks)})")
        for t in tasks:
            click.echo(f"  {_format_task(t)}")


@main.command()
@click.option("--project", default=None, help="Filter to a project name")
@click.option("--status", type=click.Choice(VALID_STATUSES), default=None, help="Filter by status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tasks(ctx, project: str | None, status: str | None, as_json: bool):
    """List tasks."""
    with _handle_errors():
        found = _service(ctx).list_tasks(project=project, status=status)

    if as_json:
        click.echo(json.dumps([_task_dict(t) for t in found], indent=2))
        return

    if not found:
        click.echo("No tasks found.")
        return
    for t in found:
        click.echo(_format_task(t))


@main.command()
@click.argument("title")
@click.option("--project", "-p", default=None, help="Project name (defaults to DEFAULT_PROJECT)")
@click.option("--notes", "-n", default=None, help="Notes")
@click.option("--due", default=None, help="Due date (YYYY-MM-DD)")
@click.pass_context
def add(ctx, title: str, project: str | None, notes: str | None, due: str | None):
    """Add a task."""
    project = project or load_config().default_project
    with _handle_errors():
        task = _service(ctx).create_task(title, project, notes=notes, due_date=due)
    click.echo(f"Saved \"{task.title}\" under {task.project}. (ID: {task.id})")


@main.command()
@click.argument("task_id")
@click.option("--title", default=None, help="New title")
@click.option("--notes", default=None, help="New notes")
@click.option("--project", default=None, help="Move to this project")
@click.option("--status", type=click.Choice(VALID_STATUSES), default=None, help="New status")
@click.option("--due", default=None, help="New due date (YYYY-MM-DD)")
@click.option("--clear-due", is_flag=True, help="Remove the due date")
@click.pass_context
def update(ctx, task_id: str, title, notes, project, status, due, clear_due: bool):
    """Update fields on a task."""
    due_date = UNSET
    if clear_due:
        due_date = None
    elif due is not None:
        due_date = due

    with _handle_errors():
        task = _service(ctx).update_task(
            task_id,
            title=title if title is not None else UNSET,
            notes=notes if notes is not None else UNSET,
            project=project if project is not None else UNSET,
            status=status if status is not None else UNSET,
            due_date=due_date,
        )
    click.echo(f"Updated: {_format_task(task)}")


@main.command()
@click.argument("task_id")
@click.pass_context
def done(ctx, task_id: str):
    """Mark a task as done."""
    with _handle_errors():
        task = _service(ctx).complete_task(task_id)
    click.echo(f"\"{task.title}\" is marked as done.")


@main.command()
@click.argument("task_id")
@click.option("--due", required=True, help="New due date (YYYY-MM-DD)")
@click.pass_context
def reopen(ctx, task_id: str, due: str):
    """Reopen a completed task with a new due date."""
    with _handle_errors():
        task = _service(ctx).reopen_task(task_id, due)
    click.echo(f"Reopened: {_format_task(task)}")


@main.command()
@click.argument("task_id")
@click.option("--until", required=True, help="Snooze until this date (YYYY-MM-DD)")
@click.pass_context
def snooze(ctx, task_id: str, until: str):
    """Snooze a task."""
    with _handle_errors():
        task = _service(ctx).snooze_task(task_id, until)
    click.echo(f"Snoozed: {_format_task(task)}")


@main.command()
@click.argument("task_id")
@click.pass_context
def delete(ctx, task_id: str):
    """Delete a task."""
    with _handle_errors():
        _service(ctx).delete_task(task_id)
    click.echo(f"Deleted task {task_id}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def projects(ctx, as_json: bool):
    """List projects with task counts."""
    with _handle_errors():
        found = _service(ctx).list_projects()

    if as_json:
        click.echo(json.dumps([_project_dict(p) for p in found], indent=2))
        return

    if not found:
        click.echo("No projects yet.")
        return
    for p in found:
        click.echo(f"[{p.id[:8]}] {p.name} ({p.task_count})")


@main.command("project-add")
@click.argument("name")
@click.pass_context
def project_add(ctx, name: str):
    """Create a project."""
    with _handle_errors():
        project = _service(ctx).create_project(name)
    click.echo(f"Created project {project.name} (ID: {project.id})")


@main.command("project-rename")
@click.argument("project_id")
@click.argument("name")
@click.pass_context
def project_rename(ctx, project_id: str, name: str):
    """Rename a project and every task filed under it."""
    with _handle_errors():
        project = _service(ctx).rename_project(project_id, name)
    click.echo(f"Renamed project to {project.name}")


@main.command("project-delete")
@click.argument("project_id")
@click.pass_context
def project_delete(ctx, project_id: str):
    """Delete a project, moving its tasks to Uncategorised."""
    with _handle_errors():
        _service(ctx).delete_project(project_id)
    click.echo(f"Deleted project {project_id}")


@main.command()
@click.option("--month", default=None, help="Month to show (YYYY-MM), defaults to this month")
@click.pass_context
def activity(ctx, month: str | None):
    """Show how many tasks were completed each day of a month."""
    with _handle_errors():
        service = _service(ctx)
        if month:
            try:
                year, month_num = (int(part) for part in month.split("-"))
            except ValueError:
                click.echo("Error: month must be YYYY-MM", err=True)
                sys.exit(1)
        else:
            today = service.clock.today()
            year, month_num = today.year, today.month
        counts = service.completion_activity(year, month_num)

    label = date(year, month_num, 1).strftime("%B %Y")
    if not counts:
        click.echo(f"No tasks completed in {label}.")
        return
    click.echo(f"Completed in {label}:")
    for day, count in counts.items():
        click.echo(f"  {day.isoformat()}  {'#' * count} {count}")
