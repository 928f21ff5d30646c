from .types import Aggregation, AggregationInputs, IterationPredictions, SplitPrediction

__all__ = ["Aggregation", "AggregationInputs", "IterationPredictions", "SplitPrediction"]
