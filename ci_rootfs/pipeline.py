from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Protocol, Sequence

from .context import ProvisionCtx
from .errors import StepFailed

logger = logging.getLogger(__name__)

StepCallback = Callable[[str], None]


class Step(Protocol):
    """A single provisioning step acting on the mounted image."""

    step_id: str

    def run(self, ctx: ProvisionCtx) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]


@contextmanager
def step_scope(step_id: str, on_step_done: Optional[StepCallback] = None) -> Iterator[None]:
    """Attribute any failure inside the block to step_id."""

    logger.info("Running step %s", step_id)
    try:
        yield
    except Exception as e:
        logger.error("Step %s failed: %s", step_id, e)
        raise StepFailed(step_id, e) from e
    if on_step_done is not None:
        on_step_done(step_id)


def run_pipeline(
    *,
    ctx: ProvisionCtx,
    steps: Sequence[Step],
    on_step_done: Optional[StepCallback] = None,
) -> PipelineResult:
    """Run steps in order; the first failure stops the pipeline."""

    ran: List[str] = []

    for step in steps:
        with step_scope(step.step_id, on_step_done):
            step.run(ctx)
        ran.append(step.step_id)

    return PipelineResult(ran_steps=ran)
