# Routes package init
"""
Employee Manager API — API Routes Package
==========================================

Route Inventory:
    - employees.py:  /api/v1/employees        (create, list)
                     /api/v1/employees/{id}   (get, update, delete)
    - health.py:     GET /health              (service health check)

Design Principle:
    Routes are THIN: they handle HTTP concerns only:
    - Extract data from request (path, query params, body)
    - Validate it and call EmployeeService
    - Format the response with correct status code and headers
"""
