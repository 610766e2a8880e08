"""
Project lifecycle rules: role scoped visibility, submission, review and deletion.

Visibility by role:

* ``student_third`` sees approved projects only.
* ``student_fourth`` sees their own projects only.
* ``faculty`` sees everything and may filter by status.

Status transitions are unrestricted between pending/approved/rejected; the only
gate is the faculty role, enforced by the route.
"""
from datetime import datetime
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload
from fastapi import UploadFile

from projecthub.core.errors import not_found_error, forbidden_error, bad_request_error
from projecthub.core.logger import logger
from projecthub.documents.storage import DocumentStore
from projecthub.models.document import Document
from projecthub.models.project import Project, ProjectStatus
from projecthub.models.user import UserRole
from projecthub.schemas.auth import Principal
from projecthub.schemas.project import ProjectCreate, ProjectFilters, ProjectOut, ProjectDetailOut, FilterOptions

ALL = "all"


def document_count_column():
    return (
        select(func.count(Document.id))
        .where(Document.project_id == Project.id)
        .correlate(Project)
        .scalar_subquery()
        .label("document_count")
    )


def to_project_out(project: Project, document_count: int) -> ProjectOut:
    out = ProjectOut.model_validate(project)
    out.document_count = int(document_count or 0)
    return out


def can_view(principal: Principal, project: Project) -> bool:
    if principal.role == UserRole.STUDENT_THIRD:
        return project.status == ProjectStatus.APPROVED.value
    if principal.role == UserRole.STUDENT_FOURTH:
        return project.author_id == principal.id
    return principal.role == UserRole.FACULTY


def ensure_can_view(principal: Principal, project: Project) -> None:
    if can_view(principal, project):
        return
    if principal.role == UserRole.STUDENT_THIRD:
        raise forbidden_error("Access denied. This project has not been approved for viewing.")
    raise forbidden_error("Access denied. You can only view details of your own projects.")


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise not_found_error("Project")
    return project


def list_projects(db: Session, principal: Principal, filters: ProjectFilters) -> list[ProjectOut]:
    q = (
        db.query(Project, document_count_column())
        .options(joinedload(Project.author))
    )

    if principal.role == UserRole.STUDENT_THIRD:
        q = q.filter(Project.status == ProjectStatus.APPROVED.value)
    elif principal.role == UserRole.STUDENT_FOURTH:
        q = q.filter(Project.author_id == principal.id)
    elif filters.status is not None:
        q = q.filter(Project.status == filters.status.value)

    if filters.domain and filters.domain != ALL:
        q = q.filter(Project.domain == filters.domain)
    if filters.year and filters.year != ALL:
        q = q.filter(Project.year == filters.year)
    search = (filters.search or "").strip()
    if search:
        escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        term = f"%{escaped}%"
        q = q.filter(or_(
            Project.title.ilike(term, escape="\\"),
            Project.abstract.ilike(term, escape="\\"),
            Project.technologies.ilike(term, escape="\\"),
        ))

    rows = q.order_by(Project.submitted_date.desc(), Project.id.desc()).all()
    return [to_project_out(project, count) for project, count in rows]


def get_project(db: Session, principal: Principal, project_id: int) -> ProjectDetailOut:
    project = get_project_or_404(db, project_id)
    ensure_can_view(principal, project)
    out = ProjectDetailOut.model_validate(project)
    out.document_count = len(out.documents)
    return out


def create_project(
    db: Session,
    principal: Principal,
    payload: ProjectCreate,
    files: list[UploadFile],
    store: DocumentStore,
) -> tuple[Project, int]:
    """Persist a submission and its documents.

    The batch is validated before any byte is written. If anything fails after
    the files hit the disk, the rows are rolled back and the files removed.
    """
    store.validate(files)
    stored = store.save(files)
    try:
        project = Project(
            title=payload.title,
            abstract=payload.abstract,
            domain=payload.domain,
            year=payload.year,
            technologies=payload.technologies,
            author_id=principal.id,
            status=ProjectStatus.PENDING.value,
        )
        db.add(project)
        db.flush()
        for s in stored:
            db.add(Document(
                project_id=project.id,
                filename=s.filename,
                original_name=s.original_name,
                file_path=s.path,
                file_size=s.size,
                mime_type=s.mime_type,
            ))
        db.commit()
    except Exception:
        db.rollback()
        store.remove(s.path for s in stored)
        raise
    db.refresh(project)
    logger.info("Project {} submitted by user {} with {} document(s)", project.id, principal.id, len(stored))
    return project, len(stored)


def update_status(db: Session, project_id: int, new_status: str) -> Project:
    allowed = [s.value for s in ProjectStatus]
    if new_status not in allowed:
        raise bad_request_error(f"Invalid status. Must be one of: {', '.join(allowed)}")
    project = get_project_or_404(db, project_id)
    project.status = new_status
    # set explicitly, onupdate does not fire when the status is unchanged
    project.updated_date = datetime.utcnow()
    db.commit()
    db.refresh(project)
    logger.info("Project {} set to {}", project.id, new_status)
    return project


def delete_project(db: Session, principal: Principal, project_id: int, store: DocumentStore) -> list[str]:
    """Delete a project, its document rows and (best effort) its files.

    Returns the paths whose removal failed; the database row is authoritative,
    so such failures do not fail the delete.
    """
    project = get_project_or_404(db, project_id)
    if principal.role == UserRole.STUDENT_THIRD:
        raise forbidden_error("Access denied. You do not have permission to delete projects.")
    if principal.role == UserRole.STUDENT_FOURTH and project.author_id != principal.id:
        raise forbidden_error("Access denied. You can only delete your own projects.")

    paths = [d.file_path for d in project.documents]
    db.delete(project)
    db.commit()

    failed = store.remove(paths)
    logger.info("Project {} deleted by user {} ({} file(s), {} not removed)",
                project_id, principal.id, len(paths), len(failed))
    return failed


def get_document(db: Session, principal: Principal, project_id: int, document_id: int) -> Document:
    project = get_project_or_404(db, project_id)
    if not can_view(principal, project):
        if principal.role == UserRole.STUDENT_THIRD:
            raise forbidden_error("Access denied. Project is not approved.")
        raise forbidden_error("Access denied. You can only download your own project documents.")
    document = (
        db.query(Document)
        .filter(Document.id == document_id, Document.project_id == project_id)
        .first()
    )
    if document is None:
        raise not_found_error("Document")
    return document


def filter_options(db: Session) -> FilterOptions:
    domains = db.scalars(
        select(Project.domain).where(Project.domain.is_not(None)).distinct().order_by(Project.domain)
    ).all()
    years = db.scalars(
        select(Project.year).where(Project.year.is_not(None)).distinct().order_by(Project.year.desc())
    ).all()
    return FilterOptions(domains=list(domains), years=list(years))

