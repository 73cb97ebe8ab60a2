"""AI study tools blueprint."""
from __future__ import annotations

from typing import Callable, Type

from flask import Blueprint, request
from pydantic import BaseModel

from ...errors import Result, parse_payload, respond
from ...llm.core import current_llm
from ...services.study_service import StudyToolsService
from .schemas import ExplainConceptIn, GenerateQuestionsIn, StudyPlanIn, SuggestTopicsIn


bp = Blueprint("ai", __name__)


def _service() -> StudyToolsService:
    llm = current_llm()
    return StudyToolsService(lambda: llm.provider)


def _run(model: Type[BaseModel], tool: Callable[[StudyToolsService, BaseModel], Result]):
    parsed = parse_payload(model, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    return respond(tool(_service(), parsed.unwrap()), render=lambda out: out.model_dump(mode="json"))


@bp.post("/explain")
def explain_concept():
    return _run(ExplainConceptIn, StudyToolsService.explain_concept)


@bp.post("/topics")
def suggest_related_topics():
    return _run(SuggestTopicsIn, StudyToolsService.suggest_related_topics)


@bp.post("/questions")
def generate_questions():
    return _run(GenerateQuestionsIn, StudyToolsService.generate_questions)


@bp.post("/study-plan")
def generate_study_plan():
    return _run(StudyPlanIn, StudyToolsService.generate_study_plan)
