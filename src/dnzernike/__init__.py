from dnzernike import config
from dnzernike.api import DoubleNormalizedZernikeFeatureSet, compute_moment_set, feature_names, measure_regions
from dnzernike.config import MomentSetConfig
from dnzernike.core.geometry import Circle, DualCircleNormalizer
from dnzernike.core.moment import compute_moment

__all__ = [
    "config",
    "Circle",
    "DualCircleNormalizer",
    "MomentSetConfig",
    "DoubleNormalizedZernikeFeatureSet",
    "compute_moment",
    "compute_moment_set",
    "feature_names",
    "measure_regions",
]
