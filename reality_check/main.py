from __future__ import annotations

"""FastAPI surface for Reality Check rounds and the projection/evaluation core."""

import os
import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from reality_check.logging_config import LOG_LEVEL_ENV, get_logger, setup_logging
from reality_check.models.domain import (
    ChecklistItem,
    ConcernResult,
    DiagnosisRequest,
    Feedback,
    ProjectionYear,
    RoundView,
    Scenario,
)
from reality_check.simulation.concerns import describe_all_concerns
from reality_check.simulation.engine import project
from reality_check.simulation.scenario import generate_scenario
from reality_check.simulation.scoring import score

setup_logging(os.environ.get(LOG_LEVEL_ENV, "INFO"))
logger = get_logger(__name__)

DEFAULT_MAX_ROUNDS = 100


@dataclass
class Round:
    """One generated scenario with its projection and fully evaluated checklist."""
    round_id: str
    scenario: Scenario
    projection: List[ProjectionYear]
    concerns: List[ConcernResult]
    seed: Optional[int] = None

    def view(self) -> RoundView:
        """Player-facing view: evidence for every concern, verdicts withheld."""
        return RoundView(
            round_id=self.round_id,
            scenario=self.scenario,
            projection=self.projection,
            checklist=[
                ChecklistItem(id=c.id, title=c.title, description=c.description, evidence=c.evidence)
                for c in self.concerns
            ],
            seed=self.seed,
        )

    @property
    def truth_ids(self) -> List[str]:
        """Ids of the concerns that actually apply (the round's ground truth)."""
        return [c.id for c in self.concerns if c.applies]


class RoundStore:
    """In-memory holder for rounds between the "meet the student" and diagnosis steps.

    Session state never outlives the process; a round is discarded once it has
    been scored, and abandoned rounds are evicted oldest-first once more than
    ``max_rounds`` are open. Lookups raise a 404-style HTTPException so the
    routes stay thin.
    """
    def __init__(self, max_rounds: int = DEFAULT_MAX_ROUNDS) -> None:
        """Start empty; ``max_rounds`` caps how many undiagnosed rounds are kept."""
        self.max_rounds = max_rounds
        self.rounds: "OrderedDict[str, Round]" = OrderedDict()

    def create(self, seed: Optional[int] = None) -> Round:
        """Generate, project, and evaluate a fresh scenario, then keep it."""
        rng = np.random.default_rng(seed)
        scenario = generate_scenario(rng)
        projection = project(scenario)
        concerns = describe_all_concerns(scenario, projection)
        round_ = Round(
            round_id=uuid.uuid4().hex,
            scenario=scenario,
            projection=projection,
            concerns=concerns,
            seed=seed,
        )
        self.rounds[round_.round_id] = round_
        while len(self.rounds) > self.max_rounds:
            evicted_id, _ = self.rounds.popitem(last=False)
            logger.info("Evicted abandoned round %s", evicted_id)
        logger.info(
            "Created round %s for %s (%s concerns apply)",
            round_.round_id,
            scenario.name,
            len(round_.truth_ids),
        )
        return round_

    def get(self, round_id: str) -> Round:
        """Return a stored round or raise a 404 if it does not exist."""
        round_ = self.rounds.get(round_id)
        if round_ is None:
            raise HTTPException(status_code=404, detail="Round not found")
        return round_

    def discard(self, round_id: str) -> None:
        """Forget a round once it has been scored; unknown ids are ignored."""
        self.rounds.pop(round_id, None)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown of the service."""
    logger.info("Reality Check API starting (version %s)", app.version)
    yield
    logger.info("Reality Check API shutting down")


store = RoundStore()
app = FastAPI(title="Reality Check", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    """Lightweight liveness probe."""
    return {"status": "ok"}


@app.post("/rounds")
def create_round(seed: Optional[int] = None) -> RoundView:
    """Start a round: a new student, their 10-year projection, and the concern checklist.

    Passing ``seed`` replays the same student, which is handy for classroom
    walkthroughs where everyone looks at identical numbers.
    """
    return store.create(seed).view()


@app.get("/rounds/{round_id}")
def get_round(round_id: str) -> RoundView:
    """Re-fetch an open round's player view; 404 once scored or evicted."""
    return store.get(round_id).view()


@app.post("/rounds/{round_id}/diagnosis")
def submit_diagnosis(round_id: str, diagnosis: DiagnosisRequest) -> Feedback:
    """Score the player's flagged concerns against the round's ground truth.

    The round is discarded afterwards; each round is diagnosed once.
    """
    round_ = store.get(round_id)
    feedback = score(round_.truth_ids, diagnosis.selected_ids, round_.concerns)
    store.discard(round_id)
    logger.info(
        "Round %s scored %s%% (%s/%s)",
        round_id,
        feedback.score,
        feedback.correct_identifications,
        feedback.total_concerns,
    )
    return feedback


@app.post("/project")
def project_scenario(scenario: Scenario) -> List[ProjectionYear]:
    """Project a caller-supplied scenario without starting a round."""
    return project(scenario)


@app.post("/evaluate")
def evaluate_scenario(scenario: Scenario) -> List[ConcernResult]:
    """Instructor route: evaluate every concern for a scenario, verdicts included.

    This sits outside the round flow on purpose. Player front ends use
    ``/rounds`` and ``/rounds/{round_id}/diagnosis``, which never expose
    verdicts before scoring; this route is for building answer keys and
    checking hand-written scenarios.
    """
    return describe_all_concerns(scenario, project(scenario))
