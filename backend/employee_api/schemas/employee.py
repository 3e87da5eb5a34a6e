"""
Employee Manager API — Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the wire contract of the employees API.
Why:   FastAPI decodes request bodies into these models, serializes responses
       from them, and generates the OpenAPI docs at /docs.

Design Decision:
    Schemas are separate from the SQLAlchemy model because the wire format
    differs from storage: salary is stored as a float but rendered as an
    integer (truncated toward zero, never rounded).
"""

import math
from typing import List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from employee_api.exceptions import ValidationError


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class EmployeeParams(BaseModel):
    """
    Body of POST /api/v1/employees and PUT /api/v1/employees/{id}.

    Missing fields decode to zero values ("" / 0) and are then rejected by
    validate_fields(), so a body like {"position": "Engineer"} yields "invalid name"
    rather than a decode error. Wrong JSON types (e.g. a string salary) fail
    decoding and are answered with "Invalid request payload".
    Unknown fields are ignored. NaN, Infinity and numbers too large for a
    double (1e400) are decode errors as well.
    """

    name: StrictStr = Field(default="", description="Employee name (non-empty)")
    position: StrictStr = Field(default="", description="Job title (non-empty)")
    salary: StrictFloat | StrictInt = Field(default=0, description="Salary (> 0)")

    model_config = ConfigDict(
        extra="ignore",
        allow_inf_nan=False,
        json_schema_extra={
            "examples": [{"name": "John Doe", "position": "Engineer", "salary": 50000}]
        },
    )

    @field_validator("salary")
    @classmethod
    def salary_fits_real_column(cls, v: float | int) -> float | int:
        """Rejects values the REAL column cannot hold (non-finite, or ints past float range)."""
        try:
            as_float = float(v)
        except OverflowError:
            raise ValueError("salary out of range") from None
        if not math.isfinite(as_float):
            raise ValueError("salary must be finite")
        return v

    def validate_fields(self) -> None:
        """
        Business validation, run by the handler before any storage call.

        Checks are ordered: name, then position, then salary; the first
        failure wins.
        """
        if self.name == "":
            raise ValidationError(message="invalid name", field="name")
        if self.position == "":
            raise ValidationError(message="invalid position", field="position")
        if self.salary <= 0:
            raise ValidationError(message="invalid salary", field="salary")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class EmployeeResponse(BaseModel):
    """
    What:  Wire representation of one employee.
    Who:   Returned by create, get, update, and as list items.
    """
    id: int = Field(description="Server-assigned employee ID")
    name: str = Field(description="Employee name")
    position: str = Field(description="Job title")
    salary: int = Field(description="Salary, truncated to an integer")

    @classmethod
    def from_values(cls, employee_id: int, name: str, position: str, salary: float) -> "EmployeeResponse":
        return cls(id=employee_id, name=name, position=position, salary=int(salary))

    @classmethod
    def from_model(cls, employee) -> "EmployeeResponse":
        return cls.from_values(employee.id, employee.name, employee.position, employee.salary)


class EmployeeListResponse(BaseModel):
    """
    What:  Body of GET /api/v1/employees.

    total counts every employee in the table, not just the returned page,
    so clients can compute the number of pages.
    """
    employees: List[EmployeeResponse] = Field(description="One page of employees, ascending by id")
    total: int = Field(description="Total number of employees")


class HealthResponse(BaseModel):
    """
    What:  Health check response.
    Who:   Returned by GET /health for container and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
