from .common import ResultModel, JSONDict
from .resample import ResampleSummary, ResampleInstancePayload
