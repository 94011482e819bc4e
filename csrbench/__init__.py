from csrbench.csr_convert import (
    CSRMatrix,
    load_matrix,
    read_coordinate_matrix,
    read_integer_matrix,
    read_matrix,
    read_real_matrix,
)
from csrbench.errors import FormatError, MatrixMarketError, RangeError
from csrbench.kernel_utils import DEFAULT_RUNS, BenchmarkResults, benchmark
from csrbench.mtx_header import FieldKind, MatrixMetadata, SymmetryKind, classify_header
from csrbench.spmv import (
    generate_test_vector,
    partition_rows,
    spmv_parallel,
    spmv_sequential,
)

__all__ = [
    "CSRMatrix",
    "load_matrix",
    "read_coordinate_matrix",
    "read_integer_matrix",
    "read_matrix",
    "read_real_matrix",
    "FormatError",
    "MatrixMarketError",
    "RangeError",
    "DEFAULT_RUNS",
    "BenchmarkResults",
    "benchmark",
    "FieldKind",
    "MatrixMetadata",
    "SymmetryKind",
    "classify_header",
    "generate_test_vector",
    "partition_rows",
    "spmv_parallel",
    "spmv_sequential",
]
