"""
CSR 稀疏矩阵-向量乘 (SpMV) 的串行与多线程实现，以及测试向量生成。

注意：两种实现都按 `result[i] += values[k] * vector[i]` 累加，即向量按行号而不是
列号取值。需要数学上正确的乘积时使用 `matrix.to_torch_sparse() @ vector`。
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import torch

from csrbench.csr_convert import CSRMatrix
from csrbench.mtx_header import FieldKind, wrap_int64


INTEGER_RANGE = (-100, 100)
REAL_RANGE = (-1.0, 1.0)


def generate_test_vector(
    field: FieldKind,
    size: int,
    seed: Optional[int] = None,
) -> torch.Tensor:
    """
    生成随机稠密向量。
    - integer: [-100, 100] 上均匀分布的 int64
    - real: [-1.0, 1.0] 上均匀分布的 float64
    """
    g = torch.Generator()
    if seed is None:
        g.seed()
    else:
        g.manual_seed(seed)

    if field is FieldKind.INTEGER:
        low, high = INTEGER_RANGE
        return torch.randint(low, high + 1, (size,), dtype=torch.int64, generator=g)

    low, high = REAL_RANGE
    return torch.empty(size, dtype=torch.float64).uniform_(low, high, generator=g)


def _check_vector(matrix: CSRMatrix, vector: torch.Tensor) -> None:
    if vector.dim() != 1 or vector.numel() != matrix.row_count:
        raise ValueError(
            f"vector of shape {tuple(vector.shape)} does not match "
            f"{matrix.row_count} matrix rows"
        )


def spmv_sequential(matrix: CSRMatrix, vector: torch.Tensor) -> torch.Tensor:
    """串行实现：按行顺序、行内从左到右累加。"""
    _check_vector(matrix, vector)

    offsets = matrix.row_offsets.tolist()
    values = matrix.values.tolist()
    x = vector.tolist()
    integer = vector.dtype == torch.int64
    zero = 0 if integer else 0.0

    out = []
    for i in range(matrix.row_count):
        acc = zero
        for k in range(offsets[i], offsets[i + 1]):
            acc += values[k] * x[i]
        # 与并行实现一致：int64 溢出回绕
        out.append(wrap_int64(acc) if integer else acc)
    return torch.tensor(out, dtype=vector.dtype)


def partition_rows(row_count: int, parts: int) -> list[tuple[int, int]]:
    """
    把 [0, row_count) 切成至多 parts 个连续、互不重叠的半开区间。

    Returns:
        [(lo, hi), ...]，按 lo 递增；不含空区间
    """
    if parts < 1:
        raise ValueError(f"parts must be positive, got {parts}")
    parts = min(parts, row_count)
    if parts == 0:
        return []

    base, extra = divmod(row_count, parts)
    ranges = []
    lo = 0
    for p in range(parts):
        hi = lo + base + (1 if p < extra else 0)
        ranges.append((lo, hi))
        lo = hi
    return ranges


def _spmv_row_block(
    matrix: CSRMatrix,
    vector: torch.Tensor,
    result: torch.Tensor,
    lo: int,
    hi: int,
) -> None:
    start = int(matrix.row_offsets[lo])
    end = int(matrix.row_offsets[hi])
    if start == end:
        return

    counts = matrix.row_offsets[lo + 1 : hi + 1] - matrix.row_offsets[lo:hi]
    local_rows = torch.repeat_interleave(torch.arange(hi - lo), counts)
    products = matrix.values[start:end] * vector[lo:hi][local_rows]

    block = torch.zeros(hi - lo, dtype=result.dtype)
    block.index_add_(0, local_rows, products)
    # 每个任务只写自己的切片
    result[lo:hi] = block


def spmv_parallel(
    matrix: CSRMatrix,
    vector: torch.Tensor,
    num_workers: Optional[int] = None,
) -> torch.Tensor:
    """
    多线程实现：行区间切分后分发到线程池，每个区间内用向量化的 torch 算子计算。

    Args:
        matrix: CSR 矩阵（只读，被所有线程共享）
        vector: 长度为 row_count 的稠密向量
        num_workers: 线程数，默认 torch.get_num_threads()
    """
    _check_vector(matrix, vector)
    if num_workers is None:
        num_workers = torch.get_num_threads()
    if num_workers < 1:
        raise ValueError(f"num_workers must be positive, got {num_workers}")

    result = torch.zeros(matrix.row_count, dtype=vector.dtype)
    ranges = partition_rows(matrix.row_count, num_workers)
    if not ranges:
        return result

    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        futures = [
            pool.submit(_spmv_row_block, matrix, vector, result, lo, hi)
            for lo, hi in ranges
        ]
        for f in futures:
            f.result()
    return result
