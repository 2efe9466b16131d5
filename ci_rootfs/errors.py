from __future__ import annotations

from typing import Optional, Sequence


class ProvisionError(RuntimeError):
    """Base class for every failure surfaced by ci-rootfs."""


class PreconditionError(ProvisionError):
    """Inputs are missing or unusable; nothing has been touched yet."""


class CommandError(ProvisionError):
    def __init__(
        self,
        argv: Sequence[str],
        returncode: Optional[int],
        stderr: str = "",
        *,
        message: Optional[str] = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message or f"Command failed ({returncode}): {' '.join(self.argv)}\n{stderr}")


class StepFailed(ProvisionError):
    def __init__(self, step_id: str, cause: BaseException) -> None:
        self.step_id = step_id
        self.cause = cause
        super().__init__(f"Step {step_id} failed: {cause}")
