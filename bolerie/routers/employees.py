# bolerie/routers/employees.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import models, schemas, auth, crud
from ..database import get_db
from .deps import not_found

router = APIRouter(
    prefix="/branches/{branch_id}/employees",
    tags=["Employees"],
    dependencies=[Depends(auth.require_admin_or_owner)],
)


@router.get("/", response_model=List[schemas.Employee])
def read_employees(
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.employee.get_multi(db, branch_id=branch.id, limit=None)


@router.post("/", response_model=schemas.Employee, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_in: schemas.EmployeeCreate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    return crud.employee.create(db, obj_in=employee_in, branch_id=branch.id)


@router.get("/{employee_id}", response_model=schemas.Employee)
def read_employee(
    employee_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_employee = crud.employee.get(db, employee_id, branch_id=branch.id)
    if db_employee is None:
        raise not_found("Employee")
    return db_employee


@router.put("/{employee_id}", response_model=schemas.Employee)
def update_employee(
    employee_id: int,
    employee_in: schemas.EmployeeUpdate,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_employee = crud.employee.get(db, employee_id, branch_id=branch.id)
    if db_employee is None:
        raise not_found("Employee")
    return crud.employee.update(db, db_obj=db_employee, obj_in=employee_in)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: int,
    branch: models.Branch = Depends(auth.get_accessible_branch),
    db: Session = Depends(get_db)
):
    db_employee = crud.employee.get(db, employee_id, branch_id=branch.id)
    if db_employee is None:
        raise not_found("Employee")
    crud.employee.remove(db, db_obj=db_employee)
    return None
