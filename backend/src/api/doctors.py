"""
Doctor directory API endpoints.

Read-only listing of doctors and departments used to populate the schedule
and booking screens.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import SchedulingError
from services import DoctorDirectory
from api.responses import DoctorListResponse, DoctorResponse, DepartmentListResponse, DepartmentResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/doctors", summary="List active doctors")
async def list_doctors(
    department_id: Optional[int] = Query(None, description="Only doctors of this department"),
    db: Session = Depends(get_db)
) -> DoctorListResponse:
    """
    List active doctors ordered by name.

    Each entry carries the department name for display.
    """
    try:
        doctors = DoctorDirectory(db).get_doctors(department_id=department_id)
        return DoctorListResponse(doctors=[DoctorResponse(**doctor) for doctor in doctors])
    except (HTTPException, SchedulingError):
        raise
    except Exception as e:
        logger.exception(f"Failed to list doctors: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list doctors"
        )


@router.get("/departments", summary="List departments")
async def list_departments(db: Session = Depends(get_db)) -> DepartmentListResponse:
    departments = DoctorDirectory(db).list_departments()
    return DepartmentListResponse(
        departments=[DepartmentResponse(id=d.id, name=d.name) for d in departments]
    )
