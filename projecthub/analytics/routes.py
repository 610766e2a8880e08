
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from projecthub.analytics import service
from projecthub.auth.deps import get_db, require_faculty
from projecthub.schemas.auth import Principal

router = APIRouter(prefix="/analytics", tags=["analytics"])

@router.get("")
def get_analytics(db: Session = Depends(get_db), principal: Principal = Depends(require_faculty)):
    return {
        "success": True,
        "message": "Analytics data retrieved successfully",
        "analytics": service.build_report(db),
        "generated_at": datetime.now(timezone.utc),
    }

@router.get("/export")
def export_data(db: Session = Depends(get_db), principal: Principal = Depends(require_faculty)):
    now = datetime.now(timezone.utc)
    data = service.export_projects(db)
    content = {
        "success": True,
        "message": "Project data exported successfully",
        "export_date": now,
        "total_records": len(data),
        "data": data,
    }
    filename = f"project_data_export_{now.date().isoformat()}.json"
    return JSONResponse(
        content=jsonable_encoder(content),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@router.get("/domain/{domain}")
def get_domain_analytics(domain: str, db: Session = Depends(get_db), principal: Principal = Depends(require_faculty)):
    return {
        "success": True,
        "message": f"Analytics for {domain} domain retrieved successfully",
        "analytics": service.domain_report(db, domain),
    }
