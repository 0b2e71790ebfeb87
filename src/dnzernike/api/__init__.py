from dnzernike.api.feature_set import DoubleNormalizedZernikeFeatureSet, compute_moment_set, feature_names
from dnzernike.api.measurements import (
    RegionMeasurement,
    measure_regions,
    read_measurements_jsonl,
    write_measurements_jsonl,
)

__all__ = [
    "DoubleNormalizedZernikeFeatureSet",
    "compute_moment_set",
    "feature_names",
    "RegionMeasurement",
    "measure_regions",
    "read_measurements_jsonl",
    "write_measurements_jsonl",
]
