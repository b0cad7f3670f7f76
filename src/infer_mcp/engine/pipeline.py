"""
Fluent, immutable builder over the engine functions.

    null = (Infer(sample)
            .specify(response="dep_delay")
            .hypothesize("point", mu=10)
            .generate(reps=1000, seed=42)
            .calculate("mean"))
    observed = Infer(sample).specify(response="dep_delay").calculate("mean")

Each step returns a new Infer; nothing is mutated. `calculate` returns the
observed Statistic when no generation was configured and a NullDistribution
otherwise (a bootstrap distribution when no null was hypothesized).
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

from infer_mcp.engine.errors import InvalidSpecification
from infer_mcp.engine.generator import NullDistribution, SeedLike, check_reps, generate, generate_bootstrap
from infer_mcp.engine.null_models import NullModel, PointNull, check_compatible, hypothesize
from infer_mcp.engine.sample import Sample
from infer_mcp.engine.specification import WorkingDataset, specify
from infer_mcp.engine.statistics import StatKind, Statistic, calculate


@dataclass(frozen=True, eq=False)
class Infer:
    sample: Sample
    working: Optional[WorkingDataset] = None
    null_model: Optional[NullModel] = None
    reps: Optional[int] = None
    seed: SeedLike = None
    n_jobs: int = 1

    def specify(self, response: str, explanatory: Optional[str] = None, success: Optional[str] = None) -> "Infer":
        if self.working is not None:
            raise InvalidSpecification("specify() was already called")
        return replace(self, working=specify(self.sample, response, explanatory=explanatory, success=success))

    def hypothesize(self, null: str, **params) -> "Infer":
        if self.working is None:
            raise InvalidSpecification("Call specify() before hypothesize()")
        if self.reps is not None:
            raise InvalidSpecification("Call hypothesize() before generate()")
        null_model = hypothesize(null, **params)
        # shape errors surface here rather than at generation time
        check_compatible(self.working, null_model)
        return replace(self, null_model=null_model)

    def generate(self, reps: int, seed: SeedLike = None, n_jobs: int = 1) -> "Infer":
        if self.working is None:
            raise InvalidSpecification("Call specify() before generate()")
        return replace(self, reps=check_reps(reps), seed=seed, n_jobs=n_jobs)

    def calculate(
        self,
        stat: Union[StatKind, str],
        mu: Optional[float] = None,
        order: Optional[Sequence[str]] = None,
    ) -> Union[Statistic, NullDistribution]:
        if self.working is None:
            raise InvalidSpecification("Call specify() before calculate()")

        if (
            mu is None
            and isinstance(self.null_model, PointNull)
            and self.null_model.parameter == "mu"
        ):
            mu = self.null_model.value

        if self.reps is None:
            return calculate(self.working, stat, mu=mu, order=order)
        if self.null_model is None:
            return generate_bootstrap(self.working, stat, self.reps, self.seed, mu=mu, order=order, n_jobs=self.n_jobs)
        return generate(self.working, self.null_model, self.reps, self.seed, stat=stat, order=order, n_jobs=self.n_jobs)
