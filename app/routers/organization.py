from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import AppException, NotFoundError
from app.database import get_db
from app.models.branch import Branch
from app.models.employee import Employee
from app.schemas.organization import BranchCreate, BranchResponse, EmployeeCreate, EmployeeResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["organization"])


@router.post("/branches", response_model=BranchResponse, status_code=status.HTTP_201_CREATED)
def create_branch(payload: BranchCreate, db: Session = Depends(get_db)):
    branch = Branch(**payload.model_dump())
    db.add(branch)
    db.commit()
    db.refresh(branch)
    logger.info(f"Branch created: {branch.name} (r={branch.radius_meters}m)")
    return branch


@router.get("/branches", response_model=List[BranchResponse])
def list_branches(db: Session = Depends(get_db)):
    return db.query(Branch).order_by(Branch.id).all()


@router.post("/employees", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    if db.query(Employee).filter(Employee.email == payload.email).first():
        raise AppException("Email already registered", status_code=409, error_code="DUPLICATE_EMAIL")
    if payload.branch_id is not None and db.get(Branch, payload.branch_id) is None:
        raise NotFoundError("Branch", payload.branch_id)

    employee = Employee(**payload.model_dump())
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@router.get("/employees", response_model=List[EmployeeResponse])
def list_employees(branch_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(Employee).filter(Employee.is_active.is_(True))
    if branch_id:
        query = query.filter(Employee.branch_id == branch_id)
    return query.order_by(Employee.id).all()
