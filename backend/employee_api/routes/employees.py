"""
Employee Manager API — Employee Route Handlers
===============================================

What:  CRUD endpoints under /api/v1/employees.
Why:   HTTP-facing translation between wire payloads and EmployeeService.
How:   Parse path/query/body, validate, delegate to the service, shape the
       response. Domain exceptions propagate to the global handlers in
       main.py, which answer with a plain-text body:

           ValidationError  → 400 (message, e.g. "invalid salary")
           undecodable body → 400 "Invalid request payload"
           NotFoundError    → 404 "Employee not found"
           DatabaseError    → 500 (message)

Route Inventory:
    POST   /api/v1/employees             create
    GET    /api/v1/employees             list (page, per_page)
    GET    /api/v1/employees/{id}        get
    PUT    /api/v1/employees/{id}        update
    DELETE /api/v1/employees/{id}        delete
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.config import Settings, get_settings
from employee_api.database import get_db_session
from employee_api.exceptions import ValidationError
from employee_api.schemas.employee import (
    EmployeeListResponse,
    EmployeeParams,
    EmployeeResponse,
)
from employee_api.services.employee_service import employee_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Employees"])

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10

# Range of a signed 64-bit integer; anything outside is treated as malformed
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_ERROR_RESPONSES = {
    400: {"description": "Invalid employee ID or request payload", "content": {"text/plain": {}}},
    404: {"description": "Employee not found", "content": {"text/plain": {}}},
    500: {"description": "Database error", "content": {"text/plain": {}}},
}


def _parse_int(raw: Optional[str]) -> Optional[int]:
    """Parses an optionally signed 64-bit decimal integer; None if malformed."""
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        return None
    value = int(raw)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_employee_id(
    employee_id: str = Path(description="Employee ID (positive integer)"),
) -> int:
    """
    Path dependency resolving {employee_id} to a positive integer.

    Resolved before the body is validated against EmployeeParams, so a bad
    id wins over a body with wrongly typed fields.
    """
    value = _parse_int(employee_id)
    if value is None or value <= 0:
        raise ValidationError(message="Invalid employee ID", field="id")
    return value


def _positive_or_default(raw: Optional[str], default: int) -> int:
    value = _parse_int(raw)
    if value is None or value <= 0:
        return default
    return value


@router.post(
    "/employees",
    status_code=201,
    response_model=EmployeeResponse,
    responses={
        201: {"description": "Employee created; Location header points at it"},
        400: _ERROR_RESPONSES[400],
        500: _ERROR_RESPONSES[500],
    },
    summary="Create a new employee",
)
async def create_employee(
    params: EmployeeParams,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeResponse:
    params.validate_fields()

    employee = await employee_service.create_employee(
        db,
        name=params.name,
        position=params.position,
        salary=params.salary,
    )

    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{employee.id}"
    return EmployeeResponse.from_model(employee)


@router.get(
    "/employees",
    response_model=EmployeeListResponse,
    responses={500: _ERROR_RESPONSES[500]},
    summary="List employees",
    description=(
        "Returns one page of employees ordered by id, plus the total number of "
        "employees. Missing, non-numeric or non-positive paging parameters fall "
        "back to page=1 and per_page=10; per_page is capped by MAX_PER_PAGE."
    ),
)
async def list_employees(
    response: Response,
    page: Optional[str] = Query(default=None, description="Page number, 1-indexed"),
    per_page: Optional[str] = Query(default=None, description="Items per page"),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeListResponse:
    page_number = _positive_or_default(page, DEFAULT_PAGE)
    page_size = min(_positive_or_default(per_page, DEFAULT_PER_PAGE), settings.max_per_page)
    # OFFSET (page-1)*per_page must fit a signed 64-bit integer
    page_number = min(page_number, INT64_MAX // page_size + 1)

    employees, total = await employee_service.list_employees(
        db, page=page_number, per_page=page_size
    )

    response.headers["X-Total-Count"] = str(total)
    return EmployeeListResponse(
        employees=[EmployeeResponse.from_model(e) for e in employees],
        total=total,
    )


@router.get(
    "/employees/{employee_id}",
    response_model=EmployeeResponse,
    responses=_ERROR_RESPONSES,
    summary="Get an employee by ID",
)
async def get_employee(
    employee_id: int = Depends(parse_employee_id),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeResponse:
    employee = await employee_service.get_employee(db, employee_id)
    return EmployeeResponse.from_model(employee)


@router.put(
    "/employees/{employee_id}",
    response_model=EmployeeResponse,
    responses=_ERROR_RESPONSES,
    summary="Update an employee",
    description="Replaces name, position and salary. The response echoes the submitted values.",
)
async def update_employee(
    params: EmployeeParams,
    employee_id: int = Depends(parse_employee_id),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeResponse:
    params.validate_fields()

    await employee_service.update_employee(
        db,
        employee_id,
        name=params.name,
        position=params.position,
        salary=params.salary,
    )

    return EmployeeResponse.from_values(employee_id, params.name, params.position, params.salary)


@router.delete(
    "/employees/{employee_id}",
    status_code=204,
    response_class=Response,
    responses=_ERROR_RESPONSES,
    summary="Delete an employee by ID",
)
async def delete_employee(
    employee_id: int = Depends(parse_employee_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await employee_service.delete_employee(db, employee_id)
    return Response(status_code=204)
