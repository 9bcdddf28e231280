"""Unit tests for SurveyDisco web route modules.

Structure:
    tests/unit/web/
    ├── conftest.py                  # Bare app, file-backed sqlite, seeding helper
    ├── test_app.py                  # Lifespan, middleware, metrics
    ├── test_dependencies.py         # Service container wiring
    ├── test_routes_health.py        # Health route and error mapping
    ├── test_routes_onedrive.py      # Folder provisioning and public files
    ├── test_routes_projects.py      # Project cards
    └── test_routes_todos.py         # TODO card and settings

Testing pattern:
    - Routers mounted on a bare FastAPI() with dependency overrides
    - Outbound collaborators replaced with AsyncMock doubles
"""
