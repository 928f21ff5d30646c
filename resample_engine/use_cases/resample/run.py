from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional, Sequence, Union

import numpy as np
from joblib import Parallel, delayed
from pydantic import ValidationError

from resample_engine.components.evaluation.measures import Measure
from resample_engine.components.interfaces import Learner, Task
from resample_engine.contracts.resample_configs import ResampleDescription
from resample_engine.contracts.run_config import ResampleOptions
from resample_engine.core.errors import ConfigurationError
from resample_engine.core.progress import LoggingProgress, ProgressCallback
from resample_engine.registries.measures import default_measure, get_measure
from resample_engine.runtime.instance import ResampleInstance, make_resample_instance

from .aggregate import aggregate_measures, measures_frame, pool_predictions
from .iterations import run_iteration
from .types import IterationResult, ResampleResult

logger = logging.getLogger(__name__)

MeasureLike = Union[str, Measure]


def resolve_options(options: Optional[ResampleOptions], overrides: dict) -> ResampleOptions:
    base = options.model_dump(exclude_unset=True) if options is not None else {}
    try:
        return ResampleOptions(**{**base, **overrides})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid resample options: {e}") from e


def resolve_measures(measures: Union[None, MeasureLike, Sequence[MeasureLike]], task: Task) -> List[Measure]:
    if measures is None:
        return [default_measure(task.kind)]
    if isinstance(measures, (str, Measure)):
        measures = [measures]
    out = [get_measure(m) if isinstance(m, str) else m for m in measures]
    if not out:
        raise ConfigurationError("At least one measure is required.")
    for m in out:
        if m.kind is not None and m.kind != task.kind:
            raise ConfigurationError(f"Measure {m.id!r} is for {m.kind} tasks, task {task.id!r} is {task.kind}.")
    return out


def _resolve_instance(
    resampling: Union[ResampleDescription, ResampleInstance],
    task: Task,
    seed: Optional[int],
) -> ResampleInstance:
    if isinstance(resampling, ResampleInstance):
        if resampling.size != task.size:
            raise ConfigurationError(
                f"Resample instance was drawn for size {resampling.size}, task {task.id!r} has {task.size} rows."
            )
        return resampling
    if isinstance(resampling, ResampleDescription):
        return make_resample_instance(resampling, task=task, seed=seed)
    raise ConfigurationError(f"Expected a ResampleDescription or ResampleInstance, got {type(resampling).__name__}.")


def _format_iteration(res: IterationResult, measures: Sequence[Measure]) -> str:
    parts = []
    for m in measures:
        if m.id in res.measures_test:
            parts.append(f"{m.id}.test={res.measures_test[m.id]:.4g}")
        if m.id in res.measures_train:
            parts.append(f"{m.id}.train={res.measures_train[m.id]:.4g}")
    return ", ".join(dict.fromkeys(parts))


def resample(
    learner: Learner,
    task: Task,
    resampling: Union[ResampleDescription, ResampleInstance],
    measures: Union[None, MeasureLike, Sequence[MeasureLike]] = None,
    *,
    options: Optional[ResampleOptions] = None,
    extract: Optional[Callable[[Any], Any]] = None,
    progress: Optional[ProgressCallback] = None,
    **overrides: Any,
) -> ResampleResult:
    """Fit and evaluate ``learner`` on every iteration of a resampling.

    Parameters
    ----------
    learner : Learner
        ``fit(view) -> model`` and ``predict(model, view) -> response``.
    task : Task
        Dataset collaborator; read-only and shared by all iterations.
    resampling : ResampleDescription | ResampleInstance
        A description is instantiated against ``task`` with ``options.seed``.
        Pass an instance to reuse the same splits across learners.
    measures : str | Measure | sequence, optional
        Measures with their bound aggregations; defaults to the task kind's
        default measure.
    options : ResampleOptions, optional
        Run options; keyword ``overrides`` (e.g. ``keep_models=True``) take
        precedence.
    extract : callable, optional
        Applied to every fitted model; results land in ``IterationResult.extract``.
    progress : ProgressCallback, optional
        Receives per-iteration progress. ``show_progress=True`` without a
        callback logs progress instead.

    Returns
    -------
    ResampleResult

    Raises
    ------
    ConfigurationError
        Invalid options, size mismatch or an aggregation that cannot be
        computed under this resampling (checked before any fit).
    LearnerFitError, LearnerPredictError
        The first failing iteration aborts the run.
    """
    opts = resolve_options(options, overrides)
    instance = _resolve_instance(resampling, task, opts.seed)
    desc = instance.desc
    predict_on = opts.predict_on or desc.predict
    measure_list = resolve_measures(measures, task)
    for m in measure_list:
        m.aggregation.check_compatible(method=desc.method, predict_on=predict_on)

    level = logging.INFO if opts.show_progress else logging.DEBUG
    if progress is None and opts.show_progress:
        progress = LoggingProgress(logger)
    n_iter = instance.iterations
    logger.log(level, "Resampling: %s", desc.describe())
    logger.log(level, "Measures: %s", ", ".join(m.key for m in measure_list))

    def _tasks():
        for i, split in enumerate(instance):
            yield delayed(run_iteration)(
                i,
                split,
                learner=learner,
                task=task,
                measures=measure_list,
                predict_on=predict_on,
                keep_model=opts.keep_models,
                extract=extract,
            )

    t_start = time.perf_counter()
    results: List[IterationResult] = []
    if progress is not None:
        progress.init(total=n_iter, label=f"Resampling {learner.id} on {task.id}")
    try:
        if opts.n_jobs == 1:
            stream = (fn(*args, **kwargs) for fn, args, kwargs in _tasks())
        else:
            # ordered generator; the first exception cancels pending iterations
            stream = Parallel(n_jobs=opts.n_jobs, backend=opts.backend, return_as="generator")(_tasks())
        for res in stream:
            results.append(res)
            logger.log(level, "[Resample] iter %d: %s", res.iteration, _format_iteration(res, measure_list))
            if progress is not None:
                progress.update(current=len(results))
    finally:
        if progress is not None:
            progress.finalize(label=f"Resampling finished ({len(results)}/{n_iter})")

    aggr = aggregate_measures(measure_list, results, predict_on=predict_on)
    runtime = time.perf_counter() - t_start
    logger.log(
        level,
        "Aggr. Result: %s",
        ", ".join(f"{k}={v:.4g}" for k, v in aggr.items()),
    )

    pred = pool_predictions(results) if opts.keep_predictions else None
    if not opts.keep_predictions:
        for res in results:
            res.predictions = None

    notes: List[str] = []
    n_missing = sum(
        1 for res in results for v in res.measures_test.values() if np.isnan(v)
    )
    if n_missing:
        notes.append(f"{n_missing} per-iteration test value(s) were undefined (empty test set).")

    return ResampleResult(
        learner_id=str(learner.id),
        task_id=str(task.id),
        instance=instance,
        measures=measure_list,
        predict_on=predict_on,
        iterations=results,
        aggr=aggr,
        measures_test=measures_frame(measure_list, results, split="test"),
        measures_train=(
            measures_frame(measure_list, results, split="train")
            if predict_on in ("train", "both")
            else None
        ),
        pred=pred,
        runtime=runtime,
        notes=notes,
    )
