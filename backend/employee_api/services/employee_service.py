"""
Employee Manager API — Employee Service (Storage Accessor)
===========================================================

What:  Translates employee operations into SQL statements and maps driver
       errors to domain errors.
Why:   Keeps every statement against the `employees` table in one place,
       independent of HTTP concerns.
How:   Each method receives the request's AsyncSession and issues a single
       parameterized statement (list may issue a second, see below).
Who:   Called by route handlers in routes/employees.py.

Error mapping:
    no matching row / zero rows affected  → NotFoundError
    any other SQLAlchemy or driver error  → DatabaseError (chained to cause)

The service performs no input validation; handlers validate before calling.

Design Decision:
    EmployeeService is stateless. It receives the session for each call, which
    keeps it trivially safe to share between concurrent requests and lets
    tests hand it a mock session.
"""

import logging
from typing import List, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.exceptions import DatabaseError, NotFoundError
from employee_api.models.employee import Employee

logger = logging.getLogger(__name__)

# Largest value the INTEGER primary key can hold. Larger ids match no row.
MAX_EMPLOYEE_ID = 2**31 - 1


def _require_storable_id(employee_id: int) -> None:
    if employee_id > MAX_EMPLOYEE_ID:
        raise NotFoundError(resource="employee", resource_id=employee_id)


class EmployeeService:
    """
    CRUD operations for the Employee entity.

    Responsibilities:
        - create_employee(): INSERT, returns the row with its new id
        - get_employee(): SELECT by id
        - update_employee(): UPDATE by id, NotFoundError on zero rows
        - delete_employee(): DELETE by id, NotFoundError on zero rows
        - list_employees(): one page ordered by id, plus the table total
    """

    async def create_employee(
        self,
        db: AsyncSession,
        name: str,
        position: str,
        salary: float,
    ) -> Employee:
        """
        Insert a new employee.

        Returns:
            The persisted Employee with its database-assigned id.

        Raises:
            DatabaseError: INSERT or COMMIT failed
        """
        employee = Employee(name=name, position=position, salary=salary)
        try:
            db.add(employee)
            await db.flush()  # Emits INSERT; the database assigns employee.id
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating employee: %s", str(e))
            raise DatabaseError(
                message="failed to create employee",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Employee %s created", employee.id)
        return employee

    async def get_employee(self, db: AsyncSession, employee_id: int) -> Employee:
        """
        Fetch one employee by id.

        Raises:
            NotFoundError: No row with this id
            DatabaseError: Query execution failed
        """
        _require_storable_id(employee_id)

        try:
            result = await db.execute(
                select(Employee).where(Employee.id == employee_id)
            )
            employee = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching employee %d: %s", employee_id, str(e))
            raise DatabaseError(
                message="failed to get employee",
                context={"employee_id": employee_id, "error_type": type(e).__name__},
            ) from e

        if employee is None:
            raise NotFoundError(resource="employee", resource_id=employee_id)
        return employee

    async def update_employee(
        self,
        db: AsyncSession,
        employee_id: int,
        name: str,
        position: str,
        salary: float,
    ) -> None:
        """
        Overwrite name, position and salary of an existing employee.

        Re-submitting the same values is harmless: the row ends up identical
        and the call still succeeds, since the id matched a row.

        Raises:
            NotFoundError: Zero rows affected
            DatabaseError: Statement execution failed
        """
        _require_storable_id(employee_id)

        stmt = (
            update(Employee)
            .where(Employee.id == employee_id)
            .values(name=name, position=position, salary=salary)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            rows_affected = result.rowcount
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating employee %d: %s", employee_id, str(e))
            raise DatabaseError(
                message="failed to update employee",
                context={"employee_id": employee_id, "error_type": type(e).__name__},
            ) from e

        if rows_affected == 0:
            raise NotFoundError(resource="employee", resource_id=employee_id)
        logger.info("Employee %d updated", employee_id)

    async def delete_employee(self, db: AsyncSession, employee_id: int) -> None:
        """
        Delete an employee.

        Raises:
            NotFoundError: Zero rows affected
            DatabaseError: Statement execution failed
        """
        _require_storable_id(employee_id)

        stmt = (
            delete(Employee)
            .where(Employee.id == employee_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            rows_affected = result.rowcount
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting employee %d: %s", employee_id, str(e))
            raise DatabaseError(
                message="failed to delete employee",
                context={"employee_id": employee_id, "error_type": type(e).__name__},
            ) from e

        if rows_affected == 0:
            raise NotFoundError(resource="employee", resource_id=employee_id)
        logger.info("Employee %d deleted", employee_id)

    async def list_employees(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[Employee], int]:
        """
        Return one page of employees and the total number of employees.

        Query plan:
            SELECT employees.*, count(*) OVER () AS total
            FROM employees ORDER BY id LIMIT :per_page OFFSET :offset

        The window column carries the table-wide count on every returned row,
        so page and total come from the same snapshot. A page past the end
        returns no rows and therefore no window value; only in that case a
        plain COUNT(*) supplies the total.

        Args:
            page: 1-indexed page number
            per_page: page size

        Returns:
            (employees ordered by ascending id, total row count)

        Raises:
            DatabaseError: Query execution failed
        """
        offset = (page - 1) * per_page
        query = (
            select(Employee, func.count().over().label("total"))
            .order_by(Employee.id.asc())
            .limit(per_page)
            .offset(offset)
        )
        try:
            result = await db.execute(query)
            rows = result.all()

            if rows:
                total = rows[0].total
            else:
                count_result = await db.execute(select(func.count()).select_from(Employee))
                total = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing employees: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="failed to list employees",
                context={"page": page, "per_page": per_page, "error_type": type(e).__name__},
            ) from e

        employees = [row.Employee for row in rows]
        return employees, total


# ── Singleton Instance ────────────────────────────────────────────────────
# EmployeeService is stateless; one instance serves every request
employee_service = EmployeeService()
