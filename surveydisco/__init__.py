"""SurveyDisco.ai - survey inquiry parsing and project folder management."""

__version__ = "1.0.0"
