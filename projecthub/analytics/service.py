"""
Read-only statistics over the project corpus.

The report is composed from independent sections. Core sections (overview,
domains, years, monthly trend) propagate their errors; optional sections
(technologies, recent activity, user counts) degrade to an empty result and
are listed under ``unavailable_sections`` instead of failing the report.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload, selectinload

from projecthub.core.logger import logger
from projecthub.models.document import Document
from projecthub.models.project import Project, ProjectStatus
from projecthub.models.user import User
from projecthub.projects.service import document_count_column
from projecthub.schemas.project import split_technologies

TOP_TECHNOLOGIES = 10
RECENT_ACTIVITY = 10
TREND_MONTHS = 12


@dataclass
class Section:
    name: str
    data: Any = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _rate(part: int, total: int) -> float:
    return round(part * 100.0 / total, 1) if total else 0.0


def _status_count(status: ProjectStatus):
    return func.sum(case((Project.status == status.value, 1), else_=0))


def _months_back(today: date, months: int) -> date:
    index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(index, 12)
    return date(year, month + 1, 1)


def overview(db: Session) -> dict:
    total, approved, pending, rejected = db.query(
        func.count(Project.id),
        _status_count(ProjectStatus.APPROVED),
        _status_count(ProjectStatus.PENDING),
        _status_count(ProjectStatus.REJECTED),
    ).one()
    total = total or 0
    documents = db.query(func.count(Document.id)).scalar() or 0
    return {
        "total_projects": total,
        "approved_projects": int(approved or 0),
        "pending_projects": int(pending or 0),
        "rejected_projects": int(rejected or 0),
        "avg_documents_per_project": round(documents / total, 2) if total else 0.0,
        "approval_rate": _rate(int(approved or 0), total),
    }


def domain_stats(db: Session) -> list[dict]:
    project_count = func.count(Project.id)
    rows = (
        db.query(
            Project.domain,
            project_count,
            _status_count(ProjectStatus.APPROVED),
            _status_count(ProjectStatus.PENDING),
            _status_count(ProjectStatus.REJECTED),
        )
        .group_by(Project.domain)
        .order_by(project_count.desc(), Project.domain)
        .all()
    )
    return [
        {
            "domain": domain,
            "project_count": count,
            "approved_count": int(approved or 0),
            "pending_count": int(pending or 0),
            "rejected_count": int(rejected or 0),
            "approval_rate": _rate(int(approved or 0), count),
        }
        for domain, count, approved, pending, rejected in rows
    ]


def year_stats(db: Session) -> list[dict]:
    rows = (
        db.query(
            Project.year,
            func.count(Project.id),
            _status_count(ProjectStatus.APPROVED),
            func.count(func.distinct(Project.author_id)),
        )
        .group_by(Project.year)
        .order_by(Project.year.desc())
        .all()
    )
    return [
        {
            "year": year,
            "project_count": count,
            "approved_count": int(approved or 0),
            "unique_students": students,
        }
        for year, count, approved, students in rows
    ]


def monthly_trends(db: Session, today: date | None = None) -> list[dict]:
    today = today or datetime.utcnow().date()
    start = _months_back(today, TREND_MONTHS - 1)
    dates = db.query(Project.submitted_date).filter(
        Project.submitted_date >= datetime.combine(start, datetime.min.time())
    ).all()
    counts = Counter(d.strftime("%Y-%m") for (d,) in dates if d is not None)
    return [{"month": month, "submissions": counts[month]} for month in sorted(counts)]


def top_technologies(db: Session, limit: int = TOP_TECHNOLOGIES) -> list[dict]:
    counts = Counter()
    for (raw,) in db.query(Project.technologies).filter(Project.technologies.is_not(None)):
        counts.update(split_technologies(raw))
    return [{"technology": tech, "usage_count": n} for tech, n in counts.most_common(limit)]


def recent_activity(db: Session, limit: int = RECENT_ACTIVITY) -> list[dict]:
    projects = (
        db.query(Project)
        .options(joinedload(Project.author))
        .order_by(Project.submitted_date.desc(), Project.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": p.id,
            "title": p.title,
            "author": p.author_name,
            "domain": p.domain,
            "status": p.status,
            "submitted_date": p.submitted_date,
        }
        for p in projects
    ]


def user_stats(db: Session) -> list[dict]:
    rows = db.query(User.role, func.count(User.id)).group_by(User.role).order_by(User.role).all()
    return [{"role": role, "count": count} for role, count in rows]


def _optional(db: Session, name: str, fn: Callable[[Session], Any]) -> Section:
    try:
        return Section(name, fn(db))
    except Exception as exc:
        db.rollback()
        logger.warning("Analytics section '{}' unavailable: {}", name, exc)
        return Section(name, [], error=str(exc))


def build_report(db: Session) -> dict:
    core = [
        Section("overview", overview(db)),
        Section("domain_stats", domain_stats(db)),
        Section("year_stats", year_stats(db)),
        Section("monthly_trends", monthly_trends(db)),
    ]
    optional = [
        _optional(db, "top_technologies", top_technologies),
        _optional(db, "recent_activity", recent_activity),
        _optional(db, "user_stats", user_stats),
    ]
    report = {s.name: s.data for s in core + optional}
    report["unavailable_sections"] = [s.name for s in optional if not s.ok]
    return report


def domain_report(db: Session, domain: str) -> dict:
    rows = (
        db.query(Project, document_count_column())
        .options(joinedload(Project.author))
        .filter(Project.domain == domain)
        .order_by(Project.submitted_date.desc(), Project.id.desc())
        .all()
    )
    statuses = Counter(p.status for p, _ in rows)
    return {
        "domain": domain,
        "total_projects": len(rows),
        "approved": statuses[ProjectStatus.APPROVED.value],
        "pending": statuses[ProjectStatus.PENDING.value],
        "rejected": statuses[ProjectStatus.REJECTED.value],
        "projects": [
            {
                "id": p.id,
                "title": p.title,
                "author": p.author_name,
                "status": p.status,
                "year": p.year,
                "submitted_date": p.submitted_date,
                "document_count": int(count or 0),
                "technologies": split_technologies(p.technologies),
            }
            for p, count in rows
        ],
    }


def export_projects(db: Session) -> list[dict]:
    projects = (
        db.query(Project)
        .options(joinedload(Project.author), selectinload(Project.documents))
        .order_by(Project.submitted_date.desc(), Project.id.desc())
        .all()
    )
    return [
        {
            "id": p.id,
            "title": p.title,
            "abstract": p.abstract,
            "domain": p.domain,
            "year": p.year,
            "author_name": p.author_name,
            "status": p.status,
            "technologies": split_technologies(p.technologies),
            "document_count": len(p.documents),
            "documents": [d.original_name for d in p.documents],
            "submitted_date": p.submitted_date,
            "updated_date": p.updated_date,
        }
        for p in projects
    ]
