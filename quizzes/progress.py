"""Typed model of an attempt's autosaved progress.

The progress document stored on `QuizAttempt.progress` has the wire shape

    {"answers": {"<questionId>": {"isAnswered": bool,
                                  "selectedOptionIndex": int | null,
                                  "answerText": str | null}},
     "questionOrder": [questionId, ...]}

Client payloads are parsed into `AnswerState` objects at the boundary
(`parse_answers`), so anything persisted has already been checked against
the quiz's questions. Stored documents are read back leniently with
`AttemptProgress.from_json`.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from api.exceptions import ValidationError
from .models import QuestionType


@dataclass(frozen=True)
class AnswerState:
    is_answered: bool
    selected_option_index: int | None = None
    answer_text: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "isAnswered": self.is_answered,
            "selectedOptionIndex": self.selected_option_index,
            "answerText": self.answer_text,
        }


@dataclass
class AttemptProgress:
    question_order: list[int] = field(default_factory=list)
    answers: dict[int, AnswerState] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "answers": {str(qid): state.to_json() for qid, state in self.answers.items()},
            "questionOrder": list(self.question_order),
        }

    @classmethod
    def from_json(cls, raw: Any) -> "AttemptProgress":
        """Rebuild progress from a stored document, skipping malformed parts."""
        if not isinstance(raw, dict):
            return cls()
        order = [qid for qid in (_as_question_id(x) for x in raw.get("questionOrder") or []) if qid is not None]
        answers: dict[int, AnswerState] = {}
        stored = raw.get("answers")
        if isinstance(stored, dict):
            for key, value in stored.items():
                qid = _as_question_id(key)
                if qid is None or not isinstance(value, dict):
                    continue
                index = value.get("selectedOptionIndex")
                text = value.get("answerText")
                answers[qid] = AnswerState(
                    is_answered=bool(value.get("isAnswered")),
                    selected_option_index=index if _is_int(index) else None,
                    answer_text=text if isinstance(text, str) else None,
                )
        return cls(question_order=order, answers=answers)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_question_id(value: Any) -> int | None:
    if _is_int(value):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return None


def parse_answers(raw: Any, questions: Mapping[int, Any]) -> dict[int, AnswerState]:
    """Validate a client `progress.answers` mapping.

    `questions` maps question id to an object exposing `type` and
    `option_count`. Unknown keys inside an answer state are dropped.
    Raises ValidationError on the first offending entry.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Invalid progress format: answers must be an object.")
    parsed: dict[int, AnswerState] = {}
    for key, value in raw.items():
        qid = _as_question_id(key)
        question = questions.get(qid) if qid is not None else None
        if question is None:
            raise ValidationError(f"Question id {key} does not belong to this quiz.")
        if not isinstance(value, dict) or not isinstance(value.get("isAnswered"), bool):
            raise ValidationError(f"Invalid answer format for question {key}.")

        index = value.get("selectedOptionIndex")
        if question.type == QuestionType.ESSAY:
            index = None
        elif index is not None:
            if not _is_int(index) or not 0 <= index < question.option_count:
                raise ValidationError(f"Invalid option index for question {key}.")

        text = value.get("answerText")
        if text is not None and not isinstance(text, str):
            raise ValidationError(f"Invalid answer text for question {key}.")

        parsed[qid] = AnswerState(is_answered=value["isAnswered"], selected_option_index=index, answer_text=text)
    return parsed


def parse_time_left(raw: Any, duration_seconds: int | None) -> int:
    """Validate `timeLeftInSeconds`; fractional seconds are floored."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw) or raw < 0:
        raise ValidationError("Invalid remaining time.")
    if duration_seconds is not None and raw > duration_seconds:
        raise ValidationError("Remaining time exceeds the quiz duration.")
    return int(raw)


def parse_violation_count(raw: Any) -> int:
    if not _is_int(raw) or raw < 0:
        raise ValidationError("Invalid violation count.")
    return raw


def shuffle_question_order(question_ids: Iterable[int], rng: random.Random | None = None) -> list[int]:
    """Return a uniformly shuffled copy of `question_ids` (Fisher-Yates)."""
    order = list(question_ids)
    rng = rng or random.SystemRandom()
    for i in range(len(order) - 1, 0, -1):
        j = rng.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return order


def presentation_order(stored_order: Iterable[int], current_ids: Iterable[int]) -> list[int]:
    """Replay `stored_order` against the quiz's current questions.

    Ids no longer present are skipped; questions added after the attempt
    started are appended in id order.
    """
    current = sorted(set(current_ids))
    present = set(current)
    seen: set[int] = set()
    order: list[int] = []
    for qid in stored_order:
        if qid in present and qid not in seen:
            order.append(qid)
            seen.add(qid)
    order.extend(qid for qid in current if qid not in seen)
    return order
