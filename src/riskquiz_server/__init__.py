"""riskquiz_server — FastAPI REST API for the screening quiz.

Hosts one in-memory ``QuizSession`` per client session id and exposes
step-by-step interaction plus read-only reference data.
"""
