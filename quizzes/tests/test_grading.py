from types import SimpleNamespace

from quizzes.grading import (
    RawAnswer,
    compute_score,
    grade_answers,
    is_option_correct,
    keyword_match,
    parse_keywords,
)
from quizzes.models import QuestionType


def mcq(qid, correct_index=0, count=3):
    options = [{"text": f"opt{i}", "isCorrect": i == correct_index} for i in range(count)]
    return SimpleNamespace(id=qid, type=QuestionType.MULTIPLE_CHOICE, options=options, correct_answer_keywords=None)


def essay(qid, keywords):
    return SimpleNamespace(id=qid, type=QuestionType.ESSAY, options=[], correct_answer_keywords=keywords)


def test_score_is_rounded_percentage():
    assert compute_score(1, 3) == 33.33
    assert compute_score(2, 3) == 66.67
    assert compute_score(2, 2) == 100.0


def test_score_is_zero_without_questions():
    assert compute_score(0, 0) == 0.0
    assert grade_answers([], [RawAnswer(1, 0)]).score == 0.0


def test_keyword_match_is_case_insensitive_substring():
    assert keyword_match("I love Paris in spring", "paris,london") is True
    assert keyword_match("Rome is nice", "paris, london") is False
    assert keyword_match("LONDON calling", " Paris , London ") is True


def test_blank_keywords_are_ignored():
    assert parse_keywords("a, ,b,,") == ["a", "b"]
    # An empty keyword would otherwise match every answer
    assert keyword_match("anything", " , ") is False


def test_keyword_match_requires_text():
    assert keyword_match(None, "paris") is False
    assert keyword_match("", "paris") is False


def test_option_correctness_bounds():
    options = [{"text": "a", "isCorrect": False}, {"text": "b", "isCorrect": True}]
    assert is_option_correct(options, 1) is True
    assert is_option_correct(options, 0) is False
    assert is_option_correct(options, 2) is False
    assert is_option_correct(options, -1) is False
    assert is_option_correct(options, None) is False
    assert is_option_correct(options, True) is False


def test_grade_answers_mixed_quiz():
    questions = [mcq(1, correct_index=2), mcq(2, correct_index=0), essay(3, "paris,london")]
    answers = [
        RawAnswer(1, 2),
        RawAnswer(2, 1),
        RawAnswer(3, answer_text="I love Paris in spring"),
    ]
    result = grade_answers(questions, answers)
    assert result.total == 3
    assert result.correct == 2
    assert result.score == 66.67
    assert [g.is_correct for g in result.graded] == [True, False, True]


def test_unmatched_answers_are_ignored():
    result = grade_answers([mcq(1)], [RawAnswer(1, 0), RawAnswer(999, 0), RawAnswer("x", 0)])
    assert result.total == 1
    assert result.correct == 1
    assert [g.question_id for g in result.graded] == [1]


def test_non_ascii_digit_question_ids_are_ignored():
    result = grade_answers([mcq(1)], [RawAnswer(1, 0), RawAnswer("²", 1), RawAnswer("½", 1)])
    assert result.total == 1
    assert result.correct == 1
    assert [g.question_id for g in result.graded] == [1]


def test_last_duplicate_answer_wins():
    result = grade_answers([mcq(1, correct_index=0)], [RawAnswer(1, 0), RawAnswer(1, 2)])
    assert result.correct == 0
    assert len(result.graded) == 1
    assert result.graded[0].selected_option_index == 2


def test_unanswered_questions_count_against_score():
    result = grade_answers([mcq(1), mcq(2)], [RawAnswer(1, 0)])
    assert result.score == 50.0


def test_from_payload_reads_camel_case():
    raw = RawAnswer.from_payload({"questionId": "7", "selectedOptionIndex": 1, "answerText": None})
    assert raw.question_id == "7"
    result = grade_answers([mcq(7, correct_index=1)], [raw])
    assert result.correct == 1


def test_essay_selected_index_is_not_stored():
    result = grade_answers([essay(1, "x")], [RawAnswer(1, 3, "x marks")])
    assert result.graded[0].selected_option_index is None
    assert result.graded[0].is_correct is True
