"""Quiz grading: compares the selected letter with the question's correct answer. No model call."""

from vnr_chat.models import QuizQuestion, QuizResult


def grade(question: QuizQuestion, selected_letter: str) -> QuizResult:
    # Exact comparison: "a" is not "A".
    return QuizResult(
        isCorrect=selected_letter == question.correct_answer,
        correctAnswer=question.correct_answer,
        explanation=question.explanation,
    )
