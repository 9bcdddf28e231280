"""Project records: job numbers, field mapping, persistence and the parse flow."""

from surveydisco.projects.fields import PROJECT_COLUMNS, ProjectField, translate_updates
from surveydisco.projects.job_numbers import generate_job_number
from surveydisco.projects.service import ProjectService

__all__ = [
    "PROJECT_COLUMNS",
    "ProjectField",
    "ProjectService",
    "generate_job_number",
    "translate_updates",
]
