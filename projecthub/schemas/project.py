
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from projecthub.models.project import ProjectStatus

def split_technologies(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]

class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    abstract: str = Field(min_length=1, max_length=2000)
    domain: str = Field(min_length=1, max_length=255)
    year: str = Field(pattern=r"^\d{4}$")
    technologies: str | None = Field(default=None, max_length=1000)

    class Config:
        str_strip_whitespace = True

    @field_validator("technologies")
    @classmethod
    def _empty_to_none(cls, v):
        return v or None

class StatusUpdate(BaseModel):
    status: str

class ProjectFilters(BaseModel):
    domain: str | None = None
    year: str | None = None
    status: ProjectStatus | None = None
    search: str | None = None

class DocumentOut(BaseModel):
    id: int
    original_name: str
    file_size: int
    uploaded_date: datetime | None = None

    class Config:
        from_attributes = True

class ProjectOut(BaseModel):
    id: int
    title: str
    abstract: str
    domain: str
    year: str
    author: str | None = Field(default=None, validation_alias="author_name")
    author_id: int
    status: ProjectStatus
    technologies: list[str] = []
    submitted_date: datetime | None = None
    updated_date: datetime | None = None
    document_count: int = 0

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("technologies", mode="before")
    @classmethod
    def _split(cls, v):
        if isinstance(v, list):
            return v
        return split_technologies(v)

class ProjectDetailOut(ProjectOut):
    documents: list[DocumentOut] = []

class ProjectListOut(BaseModel):
    success: bool = True
    message: str = "Projects fetched successfully"
    projects: list[ProjectOut]
    total: int

class ProjectDetailEnvelope(BaseModel):
    success: bool = True
    message: str = "Project details fetched successfully"
    project: ProjectDetailOut

class ProjectCreatedOut(BaseModel):
    success: bool = True
    message: str = "Project submitted successfully! It will be reviewed by faculty."
    project_id: int
    documents_uploaded: int

class StatusUpdatedOut(BaseModel):
    success: bool = True
    message: str
    new_status: ProjectStatus

class FilterOptions(BaseModel):
    domains: list[str]
    years: list[str]

class FilterOptionsOut(BaseModel):
    success: bool = True
    message: str = "Filter options fetched successfully"
    filters: FilterOptions

class MessageOut(BaseModel):
    success: bool = True
    message: str
