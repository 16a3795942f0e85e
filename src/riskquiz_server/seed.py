"""Reference-data seeding CLI — ``riskquiz-seed``.

Loads the YAML question bank and writes it to the database: questions are
upserted by id, risk tiers are replaced wholesale.  Run it after
``alembic upgrade head`` and whenever the bank changes.

Examples::

    # Validate the bank without touching the database
    uv run riskquiz-seed --dry-run

    # Seed from the default v1/ directory
    uv run riskquiz-seed

    # Seed from another bank directory
    uv run riskquiz-seed --bank-dir /srv/riskquiz/bank
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass

from riskquiz_engine.bank import QuestionBank
from riskquiz_engine.errors import FetchFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedSummary:
    """Row counts written (or, on a dry run, validated)."""

    questions: int
    tiers: int
    dry_run: bool


async def run_seed(bank: QuestionBank, *, dry_run: bool = False) -> SeedSummary:
    """Load ``bank`` and, unless ``dry_run``, write it in one transaction."""
    bank.load()
    questions = [*bank.general, *bank.specialized]
    if dry_run:
        logger.info(
            "Dry run: %d questions, %d tiers validated", len(questions), len(bank.tiers),
        )
        return SeedSummary(questions=len(questions), tiers=len(bank.tiers), dry_run=True)

    # Lazy imports to avoid loading DB machinery for a dry run
    from riskquiz_db.engine import dispose_engine, get_session_factory
    from riskquiz_db.repository import ReferenceDataRepository

    repo = ReferenceDataRepository()
    factory = get_session_factory()
    try:
        async with factory() as db:
            written_questions = await repo.upsert_questions(db, questions)
            written_tiers = await repo.replace_tiers(db, bank.tiers)
            await db.commit()
        logger.info(
            "Seed complete: questions=%d, tiers=%d", written_questions, written_tiers,
        )
        return SeedSummary(questions=written_questions, tiers=written_tiers, dry_run=False)
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``riskquiz-seed``."""
    parser = argparse.ArgumentParser(
        prog="riskquiz-seed",
        description="Load the YAML question bank into the database.",
    )
    parser.add_argument(
        "--bank-dir",
        default=None,
        help="Question bank directory (default: $QUIZ_BANK_DIR, or v1/ at the repo root)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Validate the bank without writing to the database",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        summary = asyncio.run(run_seed(QuestionBank(args.bank_dir), dry_run=args.dry_run))
    except FetchFailure as exc:
        logger.error("Invalid question bank: %s", exc)
        sys.exit(1)

    prefix = "Validated" if summary.dry_run else "Seeded"
    print(f"{prefix} {summary.questions} questions and {summary.tiers} risk tiers")
    sys.exit(0)
