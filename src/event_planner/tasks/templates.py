# src/event_planner/tasks/templates.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from ..core.timeutil import now_iso
from .task_models import Priority, Task, make_subtask, make_task


@dataclass(frozen=True, slots=True)
class TemplateTask:
    title: str
    description: str
    priority: Priority
    subtasks: tuple[str, ...]
    due_in_days: int | None = None


@dataclass(frozen=True, slots=True)
class TaskTemplate:
    key: str
    name: str
    description: str
    tasks: tuple[TemplateTask, ...]


TEMPLATES: dict[str, TaskTemplate] = {
    "wedding": TaskTemplate(
        key="wedding",
        name="Wedding Planning",
        description="A comprehensive template for planning a wedding with all essential tasks.",
        tasks=(
            TemplateTask(
                title="Set wedding date and budget",
                description="Decide on a date and establish your overall budget",
                priority=Priority.HIGH,
                subtasks=("Research venue availability", "Create initial budget spreadsheet"),
            ),
            TemplateTask(
                title="Book venue and vendors",
                description="Secure your ceremony and reception venues, plus key vendors",
                priority=Priority.HIGH,
                subtasks=(
                    "Visit and compare venues",
                    "Research and contact photographers",
                    "Book catering service",
                ),
            ),
            TemplateTask(
                title="Send invitations",
                description="Design, order, and mail wedding invitations",
                priority=Priority.MEDIUM,
                due_in_days=30,
                subtasks=(
                    "Finalize guest list",
                    "Design invitations",
                    "Address and mail invitations",
                ),
            ),
        ),
    ),
    "conference": TaskTemplate(
        key="conference",
        name="Conference Organization",
        description="Tasks for planning and executing a professional conference or event.",
        tasks=(
            TemplateTask(
                title="Define conference goals and theme",
                description="Establish the purpose, audience, and theme of your conference",
                priority=Priority.HIGH,
                subtasks=("Conduct market research", "Draft conference mission statement"),
            ),
            TemplateTask(
                title="Secure venue and set date",
                description="Book an appropriate venue and establish conference dates",
                priority=Priority.HIGH,
                subtasks=(
                    "Research venue options",
                    "Negotiate contracts",
                    "Confirm availability of key speakers",
                ),
            ),
            TemplateTask(
                title="Develop marketing strategy",
                description="Create and implement a plan to promote the conference",
                priority=Priority.MEDIUM,
                due_in_days=45,
                subtasks=(
                    "Design conference logo and branding",
                    "Create social media campaign",
                    "Develop conference website",
                ),
            ),
        ),
    ),
    "project": TaskTemplate(
        key="project",
        name="Project Management",
        description="A template for managing general projects with phases and milestones.",
        tasks=(
            TemplateTask(
                title="Project Initiation",
                description="Define the project scope, objectives, and stakeholders",
                priority=Priority.HIGH,
                subtasks=(
                    "Create project charter",
                    "Identify stakeholders",
                    "Define project scope",
                ),
            ),
            TemplateTask(
                title="Project Planning",
                description="Develop detailed project plan with timelines and resources",
                priority=Priority.HIGH,
                subtasks=(
                    "Create work breakdown structure",
                    "Develop project schedule",
                    "Allocate resources",
                    "Identify risks and mitigation strategies",
                ),
            ),
            TemplateTask(
                title="Project Execution",
                description="Implement the project plan and manage the work",
                priority=Priority.MEDIUM,
                subtasks=(
                    "Conduct kickoff meeting",
                    "Execute tasks according to plan",
                    "Monitor progress and report to stakeholders",
                ),
            ),
        ),
    ),
}


def get_template(key: str) -> TaskTemplate | None:
    return TEMPLATES.get((key or "").strip().lower())


def instantiate(template: TaskTemplate, *, event_id: str | None, now: datetime | None = None) -> list[Task]:
    """Fresh tasks (new ids, createdAt, due dates relative to now) for one template."""
    if now is None:
        now = datetime.now(timezone.utc)

    out: list[Task] = []
    for item in template.tasks:
        due = now_iso(now + timedelta(days=item.due_in_days)) if item.due_in_days is not None else None
        out.append(
            make_task(
                title=item.title,
                description=item.description,
                priority=item.priority,
                event_id=event_id,
                due_date=due,
                sub_tasks=tuple(make_subtask(title) for title in item.subtasks),
            )
        )
    return out
