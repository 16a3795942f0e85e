"""Database-level enumerations."""

import enum


class QuestionType(str, enum.Enum):
    """Values of ``questions.question_type``.

    Each maps to one engine question model and one scoring rule.
    """

    BOOLEAN = "boolean"
    RANGE = "range"
    SELECT = "select"
