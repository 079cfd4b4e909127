"""Shared pytest fixtures for the Rat25F test suite."""

from __future__ import annotations

import pytest

SAMPLE_PROGRAM = """\
"Converts temperatures"
function convert (fahr integer)
{
    return 5 * (fahr - 32) / 9;
}

integer low, high, step;
real ratio;

get (low, high, step);
while (low <= high)
{
    put (convert (low));
    low = low + step;
}
if (ratio == .5) ratio = -1.25; else ratio = 0.0; fi
"""


@pytest.fixture
def sample_program() -> str:
    return SAMPLE_PROGRAM


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.rat25f"
    path.write_text(SAMPLE_PROGRAM)
    return path
