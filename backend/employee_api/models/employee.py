"""
Employee Manager API — Employee SQLAlchemy Model
=================================================

What:  ORM model representing the `employees` table.
Why:   Maps rows to Python objects so the service layer can build
       parameterized statements with SQLAlchemy instead of SQL strings.
Who:   Used by EmployeeService for CRUD operations and by
       Database.connect() to create the table when it is missing.

Table Design:
    - id: auto-incrementing integer, assigned by the database on INSERT
    - name / position: TEXT NOT NULL (emptiness is rejected by the API, not here)
    - salary: REAL NOT NULL (positivity is rejected by the API, not here)
"""

from sqlalchemy import REAL, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from employee_api.database import Base


class Employee(Base):
    """
    A single employee record.

    Lifecycle:
        1. Inserted by create_employee(); the id comes back from the INSERT
        2. Read any number of times
        3. name/position/salary replaced in place by update_employee()
        4. Removed by delete_employee(); later lookups raise NotFoundError
    """

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    position: Mapped[str] = mapped_column(Text, nullable=False)

    salary: Mapped[float] = mapped_column(REAL, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Employee(id={self.id}, name='{self.name}', "
            f"position='{self.position}', salary={self.salary})>"
        )
