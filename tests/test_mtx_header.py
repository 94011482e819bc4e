import pytest
import torch

from csrbench import FieldKind, FormatError, MatrixMetadata, SymmetryKind, classify_header
from csrbench.mtx_header import wrap_int64


@pytest.mark.parametrize(
    "header, field, symmetry",
    [
        ("%%MatrixMarket matrix coordinate real general", FieldKind.REAL, SymmetryKind.GENERAL),
        ("%MatrixMarket matrix coordinate integer symmetric", FieldKind.INTEGER, SymmetryKind.SYMMETRIC),
        ("%%matrixmarket MATRIX Coordinate Real Skew-Symmetric\n", FieldKind.REAL, SymmetryKind.SKEW_SYMMETRIC),
        ("  %%MatrixMarket\tmatrix  coordinate integer general  ", FieldKind.INTEGER, SymmetryKind.GENERAL),
    ],
)
def test_supported_headers(header, field, symmetry):
    assert classify_header(header) == MatrixMetadata(field=field, symmetry=symmetry)


@pytest.mark.parametrize(
    "header, message",
    [
        ("%%MatrixMarket vector coordinate real general", "object kind 'vector'"),
        ("%%MatrixMarket matrix array real general", "layout 'array'"),
        ("%%MatrixMarket matrix coordinate complex general", "field kind 'complex'"),
        ("%%MatrixMarket matrix coordinate real hermitian", "symmetry kind 'hermitian'"),
        ("%%MatrixMarket matrix coordinate real", "not a recognized matrix description"),
        ("%%MatrixMarket matrix coordinate real general extra", "not a recognized matrix description"),
        ("%%%MatrixMarket matrix coordinate real general", "not a recognized matrix description"),
        ("", "not a recognized matrix description"),
    ],
)
def test_rejected_headers(header, message):
    with pytest.raises(FormatError, match=message):
        classify_header(header)


def test_layout_checked_after_field_and_symmetry():
    with pytest.raises(FormatError, match="field kind"):
        classify_header("%%MatrixMarket matrix array pattern general")


def test_field_kind_dtype():
    assert FieldKind.INTEGER.dtype == torch.int64
    assert FieldKind.REAL.dtype == torch.float64
    assert FieldKind.INTEGER.parse("-7") == -7
    assert FieldKind.REAL.parse("2.5e-1") == 0.25


def test_integer_parse_rejects_values_outside_int64():
    assert FieldKind.INTEGER.parse("9223372036854775807") == 2 ** 63 - 1
    assert FieldKind.INTEGER.parse("-9223372036854775808") == -(2 ** 63)
    with pytest.raises(ValueError):
        FieldKind.INTEGER.parse("9223372036854775808")


def test_wrap_int64():
    assert wrap_int64(2 ** 63) == -(2 ** 63)
    assert wrap_int64(2 ** 64) == 0
    assert wrap_int64(-(2 ** 63) - 1) == 2 ** 63 - 1
    assert wrap_int64(-5) == -5
