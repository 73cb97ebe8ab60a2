"""AI study tools: explanations, related topics, practice questions, study plans.

Each tool renders a YAML prompt template, asks the configured completion
provider for a JSON answer, repairs it with json_repair and validates it
against the tool's output schema.
"""
from __future__ import annotations

import functools
import importlib.resources
import json
from typing import Any, Callable, Dict, Type, TypeVar

import yaml
from json_repair import repair_json
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..domain.study import (
    ExplainConceptIn,
    ExplainConceptOut,
    GenerateQuestionsIn,
    GenerateQuestionsOut,
    StudyPlanIn,
    StudyPlanOut,
    SuggestTopicsIn,
    SuggestTopicsOut,
)
from ..errors import LLMError, returns_result
from ..llm.core import CompletionProvider

O = TypeVar("O", bound=BaseModel)

MAX_SUGGESTION_LENGTH = 200


@functools.lru_cache(maxsize=1)
def load_prompts() -> Dict[str, Dict[str, str]]:
    text = importlib.resources.files("papervault.llm.prompts").joinpath("study_tools.yaml").read_text(encoding="utf-8")
    return yaml.safe_load(text)


def llm_result_postprocess(content: str) -> Any:
    return repair_json(content, return_objects=True)


def check_suitability(output: SuggestTopicsOut) -> bool:
    """Suggestions pass when the model vouched for them and every entry is usable."""
    entries = [*output.topics, *output.search_queries]
    return (
        output.suitability_check_passed
        and bool(output.topics)
        and bool(output.search_queries)
        and all(e.strip() and len(e) <= MAX_SUGGESTION_LENGTH for e in entries)
    )


class StudyToolsService:
    def __init__(self, provider: Callable[[], CompletionProvider],
                 prompts: Dict[str, Dict[str, str]] | None = None) -> None:
        self._provider = provider
        self.prompts = prompts or load_prompts()

    def _run(self, name: str, output_model: Type[O], **fields: Any) -> O:
        template = self.prompts[name]
        schema = json.dumps(output_model.model_json_schema(), ensure_ascii=False)
        messages = [
            {"role": "system", "content": template["system"].format(schema=schema)},
            {"role": "user", "content": template["user"].format(**fields)},
        ]
        raw = self._provider().chat_completion(messages)
        data = llm_result_postprocess(raw)
        try:
            return output_model.model_validate(data)
        except ValidationError as e:
            logger.warning("{} returned output that does not match {}: {}", name, output_model.__name__, e)
            raise LLMError(f"{name} returned malformed output") from e

    @returns_result
    def explain_concept(self, inp: ExplainConceptIn) -> ExplainConceptOut:
        return self._run("explain_concept", ExplainConceptOut,
                         concept=inp.concept, level=inp.level.value, subject=inp.subject)

    @returns_result
    def suggest_related_topics(self, inp: SuggestTopicsIn) -> SuggestTopicsOut:
        out = self._run("suggest_related_topics", SuggestTopicsOut,
                        question=inp.question, level=inp.level.value, subject=inp.subject)
        if check_suitability(out):
            return out
        logger.info("topic suggestions for a {} {} question failed the suitability check", inp.level.value, inp.subject)
        return SuggestTopicsOut(
            topics=[],
            search_queries=[],
            suitability_check_passed=False,
            retrieved_information=out.retrieved_information,
        )

    @returns_result
    def generate_questions(self, inp: GenerateQuestionsIn) -> GenerateQuestionsOut:
        out = self._run("generate_questions", GenerateQuestionsOut,
                        topic=inp.topic, level=inp.level.value, subject=inp.subject,
                        question_count=inp.question_count, question_type=inp.question_type)
        out.questions = out.questions[:inp.question_count]
        return out

    @returns_result
    def generate_study_plan(self, inp: StudyPlanIn) -> StudyPlanOut:
        return self._run("generate_study_plan", StudyPlanOut,
                         subject=inp.subject, level=inp.level.value,
                         weak_areas=", ".join(inp.weak_areas) or "none given",
                         strong_areas=", ".join(inp.strong_areas) or "none given",
                         time_available=inp.time_available,
                         learning_style=inp.learning_style,
                         exam_date=inp.exam_date or "not scheduled")
