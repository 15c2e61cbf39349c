"""
Assessment modules for the B31G Assessor.
"""
from .ffs_calculations import (
    evaluate_level0,
    evaluate_level1,
    evaluate_level2,
    modified_folias_factor,
    estimated_repair_factor,
)
from .acceptance import Verdict, classify, classify_values
