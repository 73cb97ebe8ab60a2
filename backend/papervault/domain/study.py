"""Inputs and structured answers of the AI study tools."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .enums import Level


class ExplainConceptIn(BaseModel):
    concept: str = Field(..., min_length=1, max_length=300, description="The concept or term to be explained.")
    level: Level
    subject: str = Field(..., min_length=1, max_length=200)


class ExplainConceptOut(BaseModel):
    explanation: str = Field(..., description="The AI-generated explanation of the concept.")


class SuggestTopicsIn(BaseModel):
    question: str = Field(..., min_length=1, max_length=4000)
    level: Level
    subject: str = Field(..., min_length=1, max_length=200)


class SuggestTopicsOut(BaseModel):
    topics: List[str] = Field(default_factory=list, description="List of related topics.")
    search_queries: List[str] = Field(default_factory=list, description="List of suggested search queries.")
    suitability_check_passed: bool = Field(False, description="Whether the suggested materials are suitable.")
    retrieved_information: Optional[str] = Field(None, description="Background information used, if any.")


QuestionType = Literal["multiple-choice", "short-answer", "essay"]


class GenerateQuestionsIn(BaseModel):
    topic: str = Field(..., min_length=1, max_length=300)
    level: Level
    subject: str = Field(..., min_length=1, max_length=200)
    question_count: int = Field(5, ge=1, le=10)
    question_type: Literal["multiple-choice", "short-answer", "essay", "mixed"] = "mixed"


class GeneratedQuestion(BaseModel):
    question: str
    type: QuestionType
    options: Optional[List[str]] = Field(None, description="For multiple choice questions")
    correct_answer: Optional[str] = Field(None, description="The correct answer or explanation")
    difficulty: Literal["easy", "medium", "hard"]
    points: int = Field(..., ge=1, le=10)


class GenerateQuestionsOut(BaseModel):
    questions: List[GeneratedQuestion]


class StudyPlanIn(BaseModel):
    subject: str = Field(..., min_length=1, max_length=200)
    level: Level
    weak_areas: List[str] = Field(default_factory=list)
    strong_areas: List[str] = Field(default_factory=list)
    time_available: float = Field(..., gt=0, le=168, description="Hours per week available for study.")
    exam_date: Optional[str] = None
    learning_style: Literal["visual", "auditory", "kinesthetic", "reading"]


class WeekPlan(BaseModel):
    week: int
    focus: str
    topics: List[str]
    activities: List[str]
    time_allocation: str


class StudyResource(BaseModel):
    type: str
    title: str
    description: str


class Milestone(BaseModel):
    week: int
    goal: str
    assessment: str


class StudyPlan(BaseModel):
    overview: str
    weekly_schedule: List[WeekPlan]
    resources: List[StudyResource]
    milestones: List[Milestone]


class StudyPlanOut(BaseModel):
    plan: StudyPlan
