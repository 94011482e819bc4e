import io

import pytest
import torch

from csrbench import CSRMatrix


def make_mtx(header: str, *lines: str) -> io.StringIO:
    return io.StringIO("\n".join((header,) + lines) + "\n")


@pytest.fixture
def mtx():
    return make_mtx


@pytest.fixture
def diagonal_2x2() -> CSRMatrix:
    # row 0 = {(0, 2)}, row 1 = {(1, 3)}
    return CSRMatrix(
        row_count=2,
        column_count=2,
        row_offsets=torch.tensor([0, 1, 2], dtype=torch.int64),
        column_indices=torch.tensor([0, 1], dtype=torch.int64),
        values=torch.tensor([2, 3], dtype=torch.int64),
    )
