"""Simulation-based inference tools."""

from infer_mcp.tools.inference.hypothesis_tests import (
    test_one_sample_mean,
    test_one_sample_t,
    test_one_sample_median,
    test_one_proportion,
    test_difference_in_proportions,
    bootstrap_confidence_interval,
    get_all_hypothesis_test_tools,
)

__all__ = [
    'test_one_sample_mean',
    'test_one_sample_t',
    'test_one_sample_median',
    'test_one_proportion',
    'test_difference_in_proportions',
    'bootstrap_confidence_interval',
    'get_all_hypothesis_test_tools',
]
