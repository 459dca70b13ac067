"""
Doctor directory for read-only doctor and department lookups.

Doctor identity is owned outside the scheduling subsystem; this service is the
boundary the schedules, leaves and bookings use to resolve doctor ids.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from core.exceptions import NotFoundError
from models import Department, Doctor

logger = logging.getLogger(__name__)


class DoctorDirectory:
    """Read-only access to doctors and departments."""

    def __init__(self, db: Session):
        self.db = db

    def get_doctors(self, department_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        List active doctors, optionally filtered by department.

        Returns:
            List of dictionaries with id, name, specialization, department
            and department_id, ordered by name
        """
        query = self.db.query(Doctor).options(joinedload(Doctor.department)).filter(
            Doctor.is_active == True
        )
        if department_id is not None:
            query = query.filter(Doctor.department_id == department_id)

        return [
            {
                'id': doctor.id,
                'name': doctor.name,
                'specialization': doctor.specialization,
                'department': doctor.department_name,
                'department_id': doctor.department_id,
            }
            for doctor in query.order_by(Doctor.name).all()
        ]

    def get_doctor(self, doctor_id: int) -> Doctor:
        """
        Get a doctor by ID.

        Inactive doctors are still returned; their history stays addressable.

        Raises:
            NotFoundError: If no doctor has this id
        """
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    def list_departments(self) -> List[Department]:
        return self.db.query(Department).order_by(Department.name).all()
