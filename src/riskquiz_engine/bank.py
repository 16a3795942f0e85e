"""QuestionBank — loads the question bank and risk tiers from ``v1/`` YAML.

The bank is the file-based source of truth for reference data.  The seed CLI
copies it into the database, and it can also serve a quiz directly because it
implements both :class:`QuestionRepository` and :class:`RiskTierLookup`.

Layout::

    v1/questions/general.yaml      — general screening questions
    v1/questions/specialized.yaml  — per-condition follow-up questions
    v1/risk_tiers.yaml             — score bands with advice

Usage::

    bank = QuestionBank()           # QUIZ_BANK_DIR, else v1/ at repo root
    bank.load()
    general = await bank.fetch_general_questions()
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from riskquiz_engine.errors import FetchFailure
from riskquiz_engine.interfaces import QuestionRepository, RiskTierLookup
from riskquiz_engine.models.question import Question, parse_question
from riskquiz_engine.models.tier import RiskTier, match_tier

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to the directory holding pyproject.toml or .git.

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def default_bank_dir() -> Path:
    """``QUIZ_BANK_DIR`` if set, else ``v1/`` at the repo root."""
    override = os.getenv("QUIZ_BANK_DIR")
    if override:
        return Path(override)
    return find_repo_root() / "v1"


# ---------------------------------------------------------------------------
# QuestionBank
# ---------------------------------------------------------------------------

class QuestionBank(QuestionRepository, RiskTierLookup):
    """Typed, validated view of the YAML bank.

    Attributes populated after :meth:`load`:

        general      — list[Question], ordered by id
        specialized  — list[Question], ordered by id
        tiers        — list[RiskTier], in file order
    """

    def __init__(self, bank_dir: str | Path | None = None) -> None:
        self._base = Path(bank_dir) if bank_dir is not None else default_bank_dir()

        # Populated by load()
        self.general: list[Question] = []
        self.specialized: list[Question] = []
        self.tiers: list[RiskTier] = []
        self._loaded = False

    @property
    def base_dir(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse every bank file into typed models.

        Raises:
            FetchFailure: a file is missing or a row is malformed.
        """
        general = self._load_questions("general.yaml")
        specialized = self._load_questions("specialized.yaml")

        for q in general:
            if not q.is_general:
                raise FetchFailure(
                    f"Question {q.id} in general.yaml has category '{q.category}'"
                )
        for q in specialized:
            if q.is_general:
                raise FetchFailure(f"Question {q.id} in specialized.yaml is 'general'")

        seen: set[int] = set()
        for q in [*general, *specialized]:
            if q.id in seen:
                raise FetchFailure(f"Duplicate question id {q.id} in bank")
            seen.add(q.id)

        self.general = sorted(general, key=lambda q: q.id)
        self.specialized = sorted(specialized, key=lambda q: q.id)
        self.tiers = self._load_tiers()
        self._loaded = True
        logger.info(
            "QuestionBank loaded: %d general, %d specialized, %d tiers",
            len(self.general),
            len(self.specialized),
            len(self.tiers),
        )

    def _load_questions(self, filename: str) -> list[Question]:
        rows = self._read(self._base / "questions" / filename)
        try:
            return [parse_question(raw) for raw in rows]
        except ValidationError as exc:
            raise FetchFailure(f"Malformed question in {filename}: {exc}") from exc

    def _load_tiers(self) -> list[RiskTier]:
        rows = self._read(self._base / "risk_tiers.yaml")
        try:
            return [RiskTier.model_validate(raw) for raw in rows]
        except ValidationError as exc:
            raise FetchFailure(f"Malformed risk tier: {exc}") from exc

    @staticmethod
    def _read(path: Path) -> list[dict[str, Any]]:
        try:
            data = load_yaml(path)
        except FileNotFoundError as exc:
            raise FetchFailure(str(exc)) from exc
        if data is None:
            return []
        if not isinstance(data, list):
            raise FetchFailure(f"{path.name} must contain a list of rows")
        return data

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    # ------------------------------------------------------------------
    # QuestionRepository / RiskTierLookup
    # ------------------------------------------------------------------

    async def fetch_general_questions(self) -> list[Question]:
        self._ensure_loaded()
        return list(self.general)

    async def fetch_specialized_questions(self) -> list[Question]:
        self._ensure_loaded()
        return list(self.specialized)

    async def find_tier(self, score: int, condition: Optional[str] = None) -> Optional[RiskTier]:
        self._ensure_loaded()
        return match_tier(self.tiers, score, condition)

    async def list_tiers(self) -> list[RiskTier]:
        self._ensure_loaded()
        return list(self.tiers)

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get_question(self, question_id: int) -> Question:
        """Return the question with ``question_id``.  Raises KeyError if absent."""
        self._ensure_loaded()
        for q in [*self.general, *self.specialized]:
            if q.id == question_id:
                return q
        raise KeyError(f"Question {question_id} not found")

    def condition_labels(self) -> list[str]:
        """Every specialized category, in first-appearance order."""
        self._ensure_loaded()
        return list(dict.fromkeys(q.category for q in self.specialized))
