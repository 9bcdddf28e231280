"""SurveyDisco web route modules.

Each module exports a ``router`` (APIRouter) that ``surveydisco.web.app``
includes. Shared dependencies live in ``surveydisco.web.dependencies``.

Usage:
    from surveydisco.web.routes import projects
    app.include_router(projects.router)
"""

from surveydisco.web.routes import health, onedrive, projects, settings, todos

__all__ = ["health", "onedrive", "projects", "settings", "todos"]
