"""Route a ``QueueModelParams`` to the matching closed-form solver."""

from __future__ import annotations

from typing import Optional, Union

from .metrics import as_count, solve_mm1, solve_mm1n
from .metrics_mmc import solve_mmc, solve_mmcn
from .results import ModelType, QueueModelParams, SolveOutcome, invalid


def infer_model(params: QueueModelParams) -> ModelType:
    """Pick the variant implied by which of ``c`` and ``n`` are set."""
    servers = as_count(params.c) if params.c is not None else 1
    single = servers == 1
    if params.n is None:
        return ModelType.MM1 if single else ModelType.MMC
    return ModelType.MM1N if single else ModelType.MMCN


def solve(
    params: QueueModelParams, model: Optional[Union[ModelType, str]] = None
) -> SolveOutcome:
    """Solve ``params`` with ``model`` (or the inferred variant)."""
    if model is None:
        kind = infer_model(params)
    else:
        try:
            kind = ModelType(model)
        except ValueError:
            return invalid(f"Unknown model '{model}'.")

    if kind is ModelType.MM1:
        return solve_mm1(params.lam, params.mu)
    if kind is ModelType.MM1N:
        if params.n is None:
            return invalid("M/M/1/N requires the system capacity N.")
        return solve_mm1n(params.lam, params.mu, params.n)
    if kind is ModelType.MMC:
        if params.c is None:
            return invalid("M/M/c requires the number of servers c.")
        return solve_mmc(params.lam, params.mu, params.c)
    if params.c is None or params.n is None:
        return invalid("M/M/c/N requires both the number of servers c and the capacity N.")
    return solve_mmcn(params.lam, params.mu, params.c, params.n)
