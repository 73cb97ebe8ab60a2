"""Request/response schemas for the AI study tools API.

The study tools exchange the same models with the service layer, so they are
defined once in :mod:`papervault.domain.study`.
"""
from __future__ import annotations

from ...domain.study import (
    ExplainConceptIn,
    ExplainConceptOut,
    GenerateQuestionsIn,
    GenerateQuestionsOut,
    StudyPlanIn,
    StudyPlanOut,
    SuggestTopicsIn,
    SuggestTopicsOut,
)

__all__ = [
    "ExplainConceptIn",
    "ExplainConceptOut",
    "GenerateQuestionsIn",
    "GenerateQuestionsOut",
    "StudyPlanIn",
    "StudyPlanOut",
    "SuggestTopicsIn",
    "SuggestTopicsOut",
]
