import matplotlib

matplotlib.use("Agg")

import pytest

from stepsched.main import run_single_algorithm
from stepsched.utils.input_parser import InputParser


def run_lines(method, text, unit_count=1, slice_length=1):
    """Run one method over input text and return the formatted tick lines."""
    records = InputParser.parse_text(text)
    result = run_single_algorithm(method, records, unit_count, slice_length)
    return [tick.format() for tick in result['ticks']]


@pytest.fixture
def simulate_lines():
    return run_lines
