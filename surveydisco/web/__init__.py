"""HTTP surface for SurveyDisco."""
