"""Shared Hypothesis strategies and fixtures for the test suite.

Provides reusable strategies for generating header + row tables of raw cell
strings, plus small hand-written datasets used across test modules.
"""

from __future__ import annotations

import pytest
from hypothesis import strategies as st

from dataprofile.parser import build_dataset, parse_delimited


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Cells free of delimiters, quotes, newlines and surrounding whitespace so
# that serialising and re-parsing is lossless.
plain_cells = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N"),
        whitelist_characters="_-.",
        max_codepoint=127,
    ),
    min_size=0,
    max_size=8,
)

nonempty_cells = plain_cells.filter(bool)

finite_floats = st.floats(
    min_value=-1e6,
    max_value=1e6,
    allow_nan=False,
    allow_infinity=False,
    allow_subnormal=False,
)


@st.composite
def tables(
    draw: st.DrawFn,
    min_rows: int = 1,
    max_rows: int = 30,
    min_cols: int = 1,
    max_cols: int = 5,
    cells: st.SearchStrategy[str] = plain_cells,
) -> tuple[list[str], list[list[str]]]:
    """Generate a unique header and rows of raw cell strings.

    Rows are drawn from a small pool so duplicates show up regularly.

    Returns
    -------
    (header, rows) with every row as wide as the header.
    """
    n_cols = draw(st.integers(min_value=min_cols, max_value=max_cols))
    header = [f"col_{i}" for i in range(n_cols)]

    row = st.lists(cells, min_size=n_cols, max_size=n_cols)
    pool = draw(st.lists(row, min_size=1, max_size=5))
    rows = draw(
        st.lists(
            st.one_of(st.sampled_from(pool), row),
            min_size=min_rows,
            max_size=max_rows,
        )
    )
    return header, rows


@st.composite
def mixed_cells(draw: st.DrawFn) -> str:
    """A cell that is empty, numeric or a short word."""
    kind = draw(st.sampled_from(["empty", "number", "word"]))
    if kind == "empty":
        return ""
    if kind == "number":
        return repr(draw(finite_floats))
    return draw(st.sampled_from(["red", "green", "blue", "n/a"]))


def to_csv(header: list[str], rows: list[list[str]], delimiter: str = ",") -> str:
    """Serialise a header and rows without quoting."""
    lines = [delimiter.join(header)]
    lines.extend(delimiter.join(row) for row in rows)
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


SAMPLE_CSV = (
    "name,age,city,joined\n"
    "Alice,30,NYC,2021-01-01\n"
    "Bob,25,LA,2021-02-15\n"
    "Charlie,35,,2021-03-20\n"
    "Alice,30,NYC,2021-01-01\n"
    "Eve,100,SF,2021-05-05\n"
    "Frank,28,LA,2021-06-30\n"
)


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_dataset():
    return parse_delimited(SAMPLE_CSV)


@pytest.fixture
def numeric_dataset():
    return build_dataset(["value"], [["1"], ["2"], ["3"], ["4"], ["5"], ["100"]])
