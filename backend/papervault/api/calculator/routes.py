"""Calculator blueprint: replay a key sequence and return the display."""
from __future__ import annotations

from typing import List

from flask import Blueprint, request
from pydantic import BaseModel, Field

from ...errors import parse_payload, respond
from ...tools.calculator import evaluate_keys


bp = Blueprint("calculator", __name__)


class EvaluateIn(BaseModel):
    keys: List[str] = Field(..., max_length=500)
    memory: float = 0.0


@bp.post("/evaluate")
def evaluate():
    parsed = parse_payload(EvaluateIn, request.get_json(silent=True))
    if not parsed.ok:
        return respond(parsed)
    payload = parsed.unwrap()
    return respond(evaluate_keys(payload.keys, memory=payload.memory))
