"""Input and result containers shared by the closed-form queue solvers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class ModelType(str, Enum):
    """The four Markovian queue variants the solvers cover."""

    MM1 = "M/M/1"
    MM1N = "M/M/1/N"
    MMC = "M/M/c"
    MMCN = "M/M/c/N"

    @property
    def is_finite(self) -> bool:
        return self in (ModelType.MM1N, ModelType.MMCN)


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UNSTABLE = "unstable"


@dataclass(frozen=True)
class QueueModelParams:
    """Rates and sizes describing one queue; validated by the solvers."""

    lam: float
    mu: float
    c: Optional[int] = None
    n: Optional[int] = None


@dataclass(frozen=True)
class ProbabilityRow:
    """P(n) and the running P(<= n) for one population size."""

    n: int
    pn: float
    cumulative_pn: float


@dataclass(frozen=True)
class QueueModelResults:
    """Steady-state metrics of one solved model.

    ``lambda_eff`` and ``lambda_perdida`` are only filled for the finite
    capacity variants. ``c_barra`` is the expected number of idle servers.
    """

    rho: float
    p0: float
    ls: float
    lq: float
    ws: float
    wq: float
    probabilities: Tuple[ProbabilityRow, ...]
    model_type: ModelType
    params: QueueModelParams
    c_barra: Optional[float] = None
    lambda_eff: Optional[float] = None
    lambda_perdida: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["model_type"] = self.model_type.value
        return payload

    def metrics(self) -> Dict[str, Optional[float]]:
        """Scalar metrics only, in display order."""
        return {
            "rho": self.rho,
            "p0": self.p0,
            "ls": self.ls,
            "lq": self.lq,
            "ws": self.ws,
            "wq": self.wq,
            "c_barra": self.c_barra,
            "lambda_eff": self.lambda_eff,
            "lambda_perdida": self.lambda_perdida,
        }


@dataclass(frozen=True)
class CalculationError:
    """Returned instead of results when inputs are rejected or unstable."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


SolveOutcome = Union[QueueModelResults, CalculationError]


def is_error(outcome: SolveOutcome) -> bool:
    return isinstance(outcome, CalculationError)


def invalid(message: str) -> CalculationError:
    return CalculationError(kind=ErrorKind.INVALID_INPUT, message=message)


def unstable(message: str) -> CalculationError:
    return CalculationError(kind=ErrorKind.UNSTABLE, message=message)
