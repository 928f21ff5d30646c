"""Engine registries.

Name -> implementation tables for resampling designs, aggregations and
measures. Add a new implementation, register it, and the rest of the system
stays closed for modification.
"""

from .partitioners import get_partitioner, register_partitioner, list_partition_methods
from .aggregators import bind, get_aggregation, list_aggregations, register_aggregation, set_aggregation
from .measures import default_measure, get_measure, list_measures, register_measure
