
from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from projecthub.auth.deps import get_db, get_principal, require_faculty, require_fourth_year
from projecthub.core.errors import validation_error
from projecthub.documents.storage import DocumentStore, get_document_store
from projecthub.projects import service
from projecthub.schemas.auth import Principal
from projecthub.schemas.project import (
    ProjectCreate, ProjectFilters, StatusUpdate,
    ProjectListOut, ProjectDetailEnvelope, ProjectCreatedOut, StatusUpdatedOut, FilterOptionsOut, MessageOut,
)

router = APIRouter(prefix="/projects", tags=["projects"])

def _field_errors(exc: ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]

@router.get("", response_model=ProjectListOut)
def list_projects(
    domain: str | None = Query(None, max_length=255),
    year: str | None = Query(None, pattern=r"^(\d{4}|all)$"),
    status_filter: str | None = Query(None, alias="status", pattern=r"^(pending|approved|rejected|all)$"),
    search: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    filters = ProjectFilters(
        domain=domain,
        year=year,
        status=None if status_filter in (None, service.ALL) else status_filter,
        search=search,
    )
    projects = service.list_projects(db, principal, filters)
    return ProjectListOut(projects=projects, total=len(projects))

# declared before /{project_id} so "meta" is not parsed as an id
@router.get("/meta/filters", response_model=FilterOptionsOut)
def get_filter_options(db: Session = Depends(get_db), principal: Principal = Depends(get_principal)):
    return FilterOptionsOut(filters=service.filter_options(db))

@router.get("/{project_id}", response_model=ProjectDetailEnvelope)
def get_project(
    project_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ProjectDetailEnvelope(project=service.get_project(db, principal, project_id))

@router.post("", response_model=ProjectCreatedOut, status_code=status.HTTP_201_CREATED)
def submit_project(
    title: str = Form(""),
    abstract: str = Form(""),
    domain: str = Form(""),
    year: str = Form(""),
    technologies: str | None = Form(None),
    documents: list[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
    principal: Principal = Depends(require_fourth_year),
):
    try:
        payload = ProjectCreate(
            title=title, abstract=abstract, domain=domain, year=year, technologies=technologies,
        )
    except ValidationError as exc:
        raise validation_error(_field_errors(exc))

    project, count = service.create_project(db, principal, payload, documents or [], store)
    return ProjectCreatedOut(project_id=project.id, documents_uploaded=count)

@router.put("/{project_id}/status", response_model=StatusUpdatedOut)
def update_project_status(
    body: StatusUpdate,
    project_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_faculty),
):
    project = service.update_status(db, project_id, body.status)
    return StatusUpdatedOut(
        message=f"Project \"{project.title}\" has been successfully updated to '{project.status}'.",
        new_status=project.status,
    )

@router.delete("/{project_id}", response_model=MessageOut)
def delete_project(
    project_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
    principal: Principal = Depends(get_principal),
):
    service.delete_project(db, principal, project_id, store)
    return MessageOut(message="Project and all associated documents deleted successfully.")
