"""Quiz constants shared across the engine.

These values are referenced by the detector, scorer, and orchestrator.
They mirror conventions encoded in the question bank under ``v1/``.

The answer sentinels can be overridden via environment variables so that
deployments with localized boolean labels work without code changes.
"""

import os

# Category label of the general screening partition.  Every other category
# is a candidate-condition label (e.g. "skin", "breast").
GENERAL_CATEGORY = "general"

# Boolean answer sentinels.  Overridable via QUIZ_POSITIVE_ANSWER /
# QUIZ_NEGATIVE_ANSWER env vars.
POSITIVE_ANSWER = os.getenv("QUIZ_POSITIVE_ANSWER", "Yes")
NEGATIVE_ANSWER = os.getenv("QUIZ_NEGATIVE_ANSWER", "No")

# Human-readable phase labels for API responses and logging.
# The specialized label is formatted with the active candidate.
PHASE_NAMES: dict[str, str] = {
    "general": "General Screening",
    "specialized": "{candidate} Cancer Assessment",
    "done": "Completed",
}

# Key of the default target inside a raw ``next_question_logic`` mapping.
DEFAULT_BRANCH_KEY = "default"
