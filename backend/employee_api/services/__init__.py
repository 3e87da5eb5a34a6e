# Services package init
"""
Employee Manager API — Services Layer
======================================

Service Inventory:
    - EmployeeService: parameterized CRUD + paginated listing on `employees`

Why the service is separate from routes:
    1. Testability: runs against a mock or SQLite session without HTTP
    2. Single responsibility: routes handle HTTP; the service handles SQL
"""
