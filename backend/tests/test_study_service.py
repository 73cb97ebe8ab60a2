from __future__ import annotations

from papervault.domain.study import (
    ExplainConceptIn,
    GenerateQuestionsIn,
    StudyPlanIn,
    SuggestTopicsIn,
)
from papervault.domain.enums import Level
from papervault.errors import ExternalServiceError, LLMError
from papervault.services.study_service import StudyToolsService, load_prompts
from conftest import FakeProvider


def _service(provider: FakeProvider) -> StudyToolsService:
    return StudyToolsService(lambda: provider)


def test_prompts_cover_every_tool():
    prompts = load_prompts()
    for name in ("explain_concept", "suggest_related_topics", "generate_questions", "generate_study_plan"):
        assert {"system", "user"} <= set(prompts[name])


def test_explain_concept_renders_prompt_and_parses_answer():
    provider = FakeProvider({"explanation": "A derivative measures rate of change."})
    out = _service(provider).explain_concept(
        ExplainConceptIn(concept="derivative", level=Level.HIGH_SCHOOL, subject="Mathematics")
    ).unwrap()

    assert out.explanation.startswith("A derivative")
    system, user = provider.calls[0]
    assert '"explanation"' in system["content"]
    assert "derivative" in user["content"] and "High School" in user["content"]


def test_malformed_json_is_repaired():
    provider = FakeProvider('{"explanation": "Entropy is disorder"')
    out = _service(provider).explain_concept(
        ExplainConceptIn(concept="entropy", level=Level.UNIVERSITY, subject="Physics")
    ).unwrap()
    assert out.explanation == "Entropy is disorder"


def test_related_topics_pass_suitability_check():
    provider = FakeProvider({
        "topics": ["Limits", "Continuity"],
        "search_queries": ["limit definition examples"],
        "suitability_check_passed": True,
    })
    out = _service(provider).suggest_related_topics(
        SuggestTopicsIn(question="What is a limit?", level=Level.COLLEGE, subject="Mathematics")
    ).unwrap()
    assert out.topics == ["Limits", "Continuity"]
    assert out.suitability_check_passed


def test_failed_suitability_check_discards_suggestions():
    provider = FakeProvider({
        "topics": ["Something"],
        "search_queries": ["query"],
        "suitability_check_passed": False,
        "retrieved_information": "Background on the term.",
    })
    out = _service(provider).suggest_related_topics(
        SuggestTopicsIn(question="What is x?", level=Level.HIGH_SCHOOL, subject="Algebra")
    ).unwrap()
    assert (out.topics, out.search_queries, out.suitability_check_passed) == ([], [], False)
    assert out.retrieved_information == "Background on the term."


def test_generated_questions_are_capped_at_requested_count():
    question = {"question": "2+2?", "type": "short-answer", "correct_answer": "4",
                "difficulty": "easy", "points": 1}
    provider = FakeProvider({"questions": [question] * 4})
    out = _service(provider).generate_questions(
        GenerateQuestionsIn(topic="Arithmetic", level=Level.HIGH_SCHOOL, subject="Mathematics", question_count=2)
    ).unwrap()
    assert len(out.questions) == 2


def test_study_plan():
    plan = {
        "plan": {
            "overview": "Four weeks of focused revision.",
            "weekly_schedule": [{"week": 1, "focus": "Algebra", "topics": ["Equations"],
                                 "activities": ["Past papers"], "time_allocation": "5h"}],
            "resources": [{"type": "book", "title": "Algebra I", "description": "Core text"}],
            "milestones": [{"week": 1, "goal": "Solve linear equations", "assessment": "Quiz"}],
        }
    }
    provider = FakeProvider(plan)
    out = _service(provider).generate_study_plan(StudyPlanIn(
        subject="Mathematics", level=Level.HIGH_SCHOOL, weak_areas=["Algebra"],
        time_available=5, learning_style="visual",
    )).unwrap()
    assert out.plan.weekly_schedule[0].focus == "Algebra"
    assert "Algebra" in provider.calls[0][1]["content"]


def test_provider_and_schema_failures_become_external_errors():
    failing = _service(FakeProvider(LLMError("timeout"))).explain_concept(
        ExplainConceptIn(concept="x", level=Level.COLLEGE, subject="y")
    )
    assert isinstance(failing.error, ExternalServiceError)

    wrong_shape = _service(FakeProvider({"answer": 42})).explain_concept(
        ExplainConceptIn(concept="x", level=Level.COLLEGE, subject="y")
    )
    assert isinstance(wrong_shape.error, ExternalServiceError)
