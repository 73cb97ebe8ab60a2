"""Builds a minimal OpenAPI spec from existing Pydantic schemas."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import request
from pydantic import BaseModel

from ..api.ai.schemas import (
    ExplainConceptIn,
    ExplainConceptOut,
    GenerateQuestionsIn,
    GenerateQuestionsOut,
    StudyPlanIn,
    StudyPlanOut,
    SuggestTopicsIn,
    SuggestTopicsOut,
)
from ..api.calculator.routes import EvaluateIn
from ..api.papers.schemas import (
    BookmarkOut,
    CommentIn,
    CommentOut,
    PaperListOut,
    PaperOut,
    RatingIn,
    RatingOut,
)
from ..api.suggestions.schemas import SuggestionIn, SuggestionOut, SuggestionReadIn
from ..api.users.schemas import ProfileUpdateIn, RoleUpdateIn, SessionOut, SignInIn, SignUpIn, UserOut

REF = "#/components/schemas/{model}"

MODELS: List[type[BaseModel]] = [
    SignUpIn, SignInIn, SessionOut, UserOut, ProfileUpdateIn, RoleUpdateIn,
    PaperOut, PaperListOut, RatingIn, RatingOut, BookmarkOut, CommentIn, CommentOut,
    SuggestionIn, SuggestionOut, SuggestionReadIn,
    ExplainConceptIn, ExplainConceptOut, SuggestTopicsIn, SuggestTopicsOut,
    GenerateQuestionsIn, GenerateQuestionsOut, StudyPlanIn, StudyPlanOut,
    EvaluateIn,
]


def _schemas() -> Dict[str, Any]:
    schemas: Dict[str, Any] = {}
    for model in MODELS:
        schema = model.model_json_schema(ref_template=REF)
        # Nested models land in $defs; hoist them so the refs resolve.
        schemas.update(schema.pop("$defs", {}))
        schemas[model.__name__] = schema
    return schemas


def _ref(name: str) -> Dict[str, Any]:
    return {"$ref": REF.format(model=name)}


def _json_body(name: str) -> Dict[str, Any]:
    return {"required": True, "content": {"application/json": {"schema": _ref(name)}}}


def _op(tag: str, summary: str, *, body: Optional[str] = None, out: Optional[str] = None,
        status: str = "200", auth: bool = False, many: bool = False) -> Dict[str, Any]:
    response: Dict[str, Any] = {"description": "OK" if status == "200" else "Created"}
    if out:
        data = {"type": "array", "items": _ref(out)} if many else _ref(out)
        response["content"] = {"application/json": {"schema": {"type": "object", "properties": {"data": data}}}}
    op: Dict[str, Any] = {"tags": [tag], "summary": summary, "responses": {status: response}}
    if body:
        op["requestBody"] = _json_body(body)
    if auth:
        op["security"] = [{"BearerAuth": []}]
    return op


def _path_param(name: str) -> List[Dict[str, Any]]:
    return [{"name": name, "in": "path", "required": True, "schema": {"type": "string"}}]


def _filter_params() -> List[Dict[str, Any]]:
    return [
        {"name": name, "in": "query", "required": False, "schema": {"type": kind}}
        for name, kind in (("query", "string"), ("level", "string"), ("subject", "string"),
                           ("year", "integer"), ("grade", "string"))
    ]


def _upload_body() -> Dict[str, Any]:
    props = {
        "file": {"type": "string", "format": "binary"},
        "title": {"type": "string"},
        "description": {"type": "string"},
        "level": {"type": "string", "enum": ["High School", "College", "University"]},
        "subject": {"type": "string"},
        "year": {"type": "integer"},
        "grade": {"type": "string", "enum": ["Grade 10", "Grade 11", "Grade 12"]},
    }
    return {"required": True, "content": {"multipart/form-data": {"schema": {
        "type": "object", "properties": props, "required": ["file", "title", "level", "subject", "year"],
    }}}}


def build_openapi() -> Dict[str, Any]:
    base_url = f"{request.scheme}://{request.host}"
    security_schemes = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }
    upload = _op("Papers", "Upload a PDF paper (admin)", out="PaperOut", status="201", auth=True)
    upload["requestBody"] = _upload_body()
    list_papers = _op("Papers", "List papers visible to the viewer", out="PaperListOut")
    list_papers["parameters"] = _filter_params()

    return {
        "openapi": "3.0.3",
        "info": {"title": "PaperVault API", "version": "0.1.0"},
        "servers": [{"url": base_url}],
        "tags": [{"name": t} for t in ("Health", "Auth", "Users", "Papers", "Bookmarks",
                                       "Suggestions", "AI", "Calculator")],
        "paths": {
            "/api/health/": {"get": _op("Health", "Liveness probe")},
            "/api/health/db": {"get": _op("Health", "Database connectivity")},
            "/api/health/supabase": {"get": _op("Health", "Supabase client status")},
            "/api/auth/signup": {"post": _op("Auth", "Create an account", body="SignUpIn", out="SessionOut", status="201")},
            "/api/auth/signin": {"post": _op("Auth", "Sign in by email", body="SignInIn", out="SessionOut")},
            "/api/auth/me": {"get": _op("Auth", "Current user", out="UserOut", auth=True)},
            "/api/users/": {"get": _op("Users", "List users (admin)", out="UserOut", auth=True, many=True)},
            "/api/users/me": {
                "get": _op("Users", "Own profile", out="UserOut", auth=True),
                "put": _op("Users", "Update own profile", body="ProfileUpdateIn", out="UserOut", auth=True),
            },
            "/api/users/{user_id}/role": {
                "parameters": _path_param("user_id"),
                "put": _op("Users", "Set a user's role (admin)", body="RoleUpdateIn", out="UserOut", auth=True),
            },
            "/api/papers/": {"get": list_papers, "post": upload},
            "/api/papers/{paper_id}": {
                "parameters": _path_param("paper_id"),
                "get": _op("Papers", "Get paper by id", out="PaperOut"),
                "delete": _op("Papers", "Delete paper (admin)", auth=True),
            },
            "/api/papers/{paper_id}/rating": {
                "parameters": _path_param("paper_id"),
                "get": _op("Papers", "Rating summary", out="RatingOut"),
                "post": _op("Papers", "Rate a paper 1-5", body="RatingIn", out="RatingOut", auth=True),
            },
            "/api/papers/{paper_id}/bookmark": {
                "parameters": _path_param("paper_id"),
                "post": _op("Bookmarks", "Toggle bookmark", out="BookmarkOut", auth=True),
            },
            "/api/papers/{paper_id}/comments": {
                "parameters": _path_param("paper_id"),
                "get": _op("Papers", "Comments, newest first", out="CommentOut", many=True),
                "post": _op("Papers", "Add a comment", body="CommentIn", out="CommentOut", status="201", auth=True),
            },
            "/api/papers/{paper_id}/comments/stream": {
                "parameters": _path_param("paper_id"),
                "get": {"tags": ["Papers"], "summary": "Server-sent comment snapshots",
                        "responses": {"200": {"description": "text/event-stream"}}},
            },
            "/api/bookmarks/": {"get": _op("Bookmarks", "Bookmarked papers", out="PaperOut", auth=True, many=True)},
            "/api/suggestions/": {
                "get": _op("Suggestions", "Admin inbox", out="SuggestionOut", auth=True, many=True),
                "post": _op("Suggestions", "Contact the administrators", body="SuggestionIn", out="SuggestionOut", status="201"),
            },
            "/api/suggestions/{suggestion_id}/read": {
                "parameters": _path_param("suggestion_id"),
                "put": _op("Suggestions", "Mark read/unread (admin)", body="SuggestionReadIn", out="SuggestionOut", auth=True),
            },
            "/api/ai/explain": {"post": _op("AI", "Explain a concept", body="ExplainConceptIn", out="ExplainConceptOut")},
            "/api/ai/topics": {"post": _op("AI", "Suggest related topics", body="SuggestTopicsIn", out="SuggestTopicsOut")},
            "/api/ai/questions": {"post": _op("AI", "Generate practice questions", body="GenerateQuestionsIn", out="GenerateQuestionsOut")},
            "/api/ai/study-plan": {"post": _op("AI", "Generate a study plan", body="StudyPlanIn", out="StudyPlanOut")},
            "/api/calculator/evaluate": {"post": _op("Calculator", "Replay calculator keys", body="EvaluateIn")},
        },
        "components": {
            "schemas": _schemas(),
            "securitySchemes": security_schemes
        },
    }
