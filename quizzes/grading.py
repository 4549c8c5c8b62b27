"""Pure scoring helpers for quiz submissions.

Nothing here touches the database: questions are any objects exposing
`id`, `type`, `options` and `correct_answer_keywords`, so the functions can
be exercised with plain stand-ins as well as model instances.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .models import QuestionType


@dataclass(frozen=True)
class RawAnswer:
    question_id: Any
    selected_option_index: Any = None
    answer_text: Any = None

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> "RawAnswer":
        return cls(
            question_id=item.get("questionId"),
            selected_option_index=item.get("selectedOptionIndex"),
            answer_text=item.get("answerText"),
        )


@dataclass(frozen=True)
class GradedAnswer:
    question_id: int
    selected_option_index: int | None
    answer_text: str | None
    is_correct: bool


@dataclass(frozen=True)
class GradingResult:
    total: int
    correct: int
    graded: tuple[GradedAnswer, ...]

    @property
    def score(self) -> float:
        return compute_score(self.correct, self.total)


def compute_score(correct: int, total: int) -> float:
    """Percentage of correct answers, rounded to two decimals (0 when empty)."""
    return round((correct / total) * 100.0, 2) if total else 0.0


def parse_keywords(raw: str | None) -> list[str]:
    """Split a comma separated keyword list; blanks are dropped."""
    if not raw:
        return []
    return [kw.strip().lower() for kw in raw.split(",") if kw.strip()]


def keyword_match(answer_text: Any, keywords: str | None) -> bool:
    """True when any keyword occurs (case-insensitively) in the answer."""
    if not isinstance(answer_text, str) or not answer_text:
        return False
    haystack = answer_text.lower()
    return any(kw in haystack for kw in parse_keywords(keywords))


def is_option_correct(options: Any, index: Any) -> bool:
    if isinstance(index, bool) or not isinstance(index, int) or not isinstance(options, list):
        return False
    if not 0 <= index < len(options):
        return False
    option = options[index]
    return isinstance(option, dict) and option.get("isCorrect") is True


def grade_answer(question, answer: RawAnswer) -> GradedAnswer:
    text = answer.answer_text if isinstance(answer.answer_text, str) else None
    if question.type == QuestionType.ESSAY:
        return GradedAnswer(question.id, None, text, keyword_match(text, question.correct_answer_keywords))
    index = answer.selected_option_index
    if isinstance(index, bool) or not isinstance(index, int):
        index = None
    return GradedAnswer(question.id, index, text, is_option_correct(question.options, index))


def _question_key(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return None


def grade_answers(questions: Iterable[Any], answers: Iterable[RawAnswer]) -> GradingResult:
    """Grade a submission against the quiz's questions.

    Answers naming a question outside `questions` are ignored. When one
    question is answered several times the last entry wins. The total is
    the number of questions, answered or not.
    """
    by_id = {q.id: q for q in questions}
    latest: dict[int, RawAnswer] = {}
    for answer in answers:
        qid = _question_key(answer.question_id)
        if qid in by_id:
            latest[qid] = answer
    graded = tuple(grade_answer(by_id[qid], latest[qid]) for qid in sorted(latest))
    correct = sum(1 for g in graded if g.is_correct)
    return GradingResult(total=len(by_id), correct=correct, graded=graded)
