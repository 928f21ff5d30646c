from .sklearn_learner import SklearnLearner

__all__ = ["SklearnLearner"]
