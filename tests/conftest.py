"""Shared test fixtures"""
import pytest

from core.ibd_designer import IBDDesigner


@pytest.fixture
def small_designer():
    """t=6, k=2, r=3, one location, seed 42"""
    return IBDDesigner(6, 2, 3, locations=1, seed=42)


@pytest.fixture
def small_result(small_designer):
    """Generated t=6, k=2, r=3 design (seed 42, plots from 101)"""
    return small_designer.generate(start_plot=101)


@pytest.fixture
def multi_location_result():
    """t=12, k=3, r=2 design over 3 locations (seed 7)"""
    return IBDDesigner(12, 3, 2, locations=3, seed=7).generate(start_plot=101)


@pytest.fixture
def seed42_structure():
    """Location 1 replicate/block structure of the seed-42 t=6, k=2, r=3 design"""
    return [
        [[2, 1], [5, 6], [3, 4]],
        [[5, 1], [6, 3], [2, 4]],
        [[6, 4], [1, 3], [5, 2]],
    ]


@pytest.fixture
def disconnected_structure():
    """t=12, k=3, r=2 design in which treatments 2, 6, 9 share a block in both replicates"""
    return [
        [[8, 11, 4], [6, 2, 9], [3, 5, 7], [10, 12, 1]],
        [[7, 5, 1], [10, 11, 4], [8, 3, 12], [6, 9, 2]],
    ]
