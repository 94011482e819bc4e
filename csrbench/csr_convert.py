"""
坐标格式 (Matrix Market coordinate) 到 CSR 的流式转换。

提供：
1. CSRMatrix：不可变的 CSR 结构（row_offsets / column_indices / values 均为 torch 张量）。
2. read_coordinate_matrix：按字段类型参数化的通用转换器，负责对称展开。
3. read_integer_matrix / read_real_matrix / read_matrix / load_matrix 便捷入口。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, TextIO, TypeVar, Union

import torch

from csrbench.errors import FormatError, RangeError
from csrbench.mtx_header import (
    FieldKind,
    MatrixMetadata,
    SymmetryKind,
    INT64_MAX,
    check_int64,
    classify_header,
    wrap_int64,
)


logger = logging.getLogger(__name__)

T = TypeVar("T", int, float)


@dataclass(frozen=True)
class CSRMatrix:
    """
    Compressed Sparse Row 矩阵。

    - row_offsets: int64 [row_count + 1]，前缀和偏移量，row_offsets[r] 表示第 r 行在
      column_indices / values 中的起始位置
    - column_indices: int64 [nnz]，0-based 列索引
    - values: [nnz]，integer 字段为 int64，real 字段为 float64
    """

    row_count: int
    column_count: int
    row_offsets: torch.Tensor
    column_indices: torch.Tensor
    values: torch.Tensor

    @property
    def nnz(self) -> int:
        return int(self.values.numel())

    @property
    def shape(self) -> tuple[int, int]:
        return (self.row_count, self.column_count)

    @property
    def dtype(self) -> torch.dtype:
        return self.values.dtype

    def row(self, r: int) -> tuple[torch.Tensor, torch.Tensor]:
        """返回第 r 行的 (column_indices, values) 切片。"""
        start = int(self.row_offsets[r])
        end = int(self.row_offsets[r + 1])
        return self.column_indices[start:end], self.values[start:end]

    def to_dict(self) -> dict[tuple[int, int], Union[int, float]]:
        """根据 row_offsets 还原 (row, column) -> value 映射。"""
        offsets = self.row_offsets.tolist()
        columns = self.column_indices.tolist()
        values = self.values.tolist()
        entries = {}
        for r in range(self.row_count):
            for k in range(offsets[r], offsets[r + 1]):
                entries[(r, columns[k])] = values[k]
        return entries

    def to_torch_sparse(self) -> torch.Tensor:
        """转换为 torch.sparse_csr_tensor（共享底层数据）。"""
        return torch.sparse_csr_tensor(
            self.row_offsets,
            self.column_indices,
            self.values,
            size=self.shape,
        )


def _is_skipped(line: str) -> bool:
    return line.startswith("%") or not line.strip()


def _content_lines(lines: Iterable[str], first_line_number: int) -> Iterator[tuple[int, str]]:
    """跳过注释行与空行，产出 (1-based 行号, 行内容)。"""
    for line_number, line in enumerate(lines, start=first_line_number):
        if _is_skipped(line):
            continue
        yield line_number, line


def _parse_size_line(line: str, line_number: int) -> tuple[int, int, int]:
    tokens = line.split()
    if len(tokens) != 3:
        raise FormatError("size line malformed", line_number)
    try:
        rows, columns, nonzeros = (check_int64(int(t)) for t in tokens)
    except ValueError:
        raise FormatError("size line malformed", line_number) from None
    # rows + 1 个偏移量也必须能用 int64 表示
    if rows < 0 or columns < 0 or nonzeros < 0 or rows == INT64_MAX:
        raise FormatError("size line malformed", line_number)
    return rows, columns, nonzeros


def _map_to_csr(
    entries: dict[tuple[int, int], T],
    rows: int,
    columns: int,
    dtype: torch.dtype,
) -> CSRMatrix:
    """按行优先、列次之的顺序把坐标映射写成 CSR。"""
    keys = sorted(entries)
    row_ids = torch.tensor([r for r, _ in keys], dtype=torch.int64)
    column_indices = torch.tensor([c for _, c in keys], dtype=torch.int64)
    values = torch.tensor([entries[k] for k in keys], dtype=dtype)

    # 每行计数 + 前缀和；空行得到相同的相邻偏移
    row_offsets = torch.zeros(rows + 1, dtype=torch.int64)
    if keys:
        counts = torch.bincount(row_ids, minlength=rows)
        row_offsets[1:] = torch.cumsum(counts, dim=0)

    return CSRMatrix(
        row_count=rows,
        column_count=columns,
        row_offsets=row_offsets,
        column_indices=column_indices,
        values=values,
    )


def read_coordinate_matrix(
    mtx_file: TextIO,
    symmetry: SymmetryKind,
    value_parser: Callable[[str], T],
    dtype: torch.dtype,
    first_line_number: int = 2,
) -> CSRMatrix:
    """
    读取已去掉头部的 Matrix Market 坐标数据，返回 CSR 矩阵。

    Args:
        mtx_file: 文本流，位于头部之后
        symmetry: 对称类型，决定是否镜像非对角元素（skew-symmetric 镜像时取负）
        value_parser: 将数值字面量转换为 T 的函数
        dtype: values 张量的 dtype
        first_line_number: mtx_file 第一行在整个输入中的行号，仅用于报错

    Raises:
        FormatError: size 行或数据行格式错误，或非零数与声明不符
        RangeError: 坐标超出声明的维度
    """
    lines = _content_lines(mtx_file, first_line_number)

    size_line = next(lines, None)
    if size_line is None:
        raise FormatError("size line malformed")
    rows, columns, declared_nonzeros = _parse_size_line(size_line[1], size_line[0])

    entries: dict[tuple[int, int], T] = {}
    supplied = 0
    for line_number, line in lines:
        tokens = line.split()
        if len(tokens) != 3:
            raise FormatError("data line malformed", line_number)
        try:
            row = int(tokens[0]) - 1
            column = int(tokens[1]) - 1
            value = value_parser(tokens[2])
        except ValueError as exc:
            raise FormatError(f"data line malformed: {exc}", line_number) from exc
        supplied += 1

        if not (0 <= row < rows and 0 <= column < columns):
            raise RangeError(row, column, (rows, columns), line_number)

        # 重复坐标：后写覆盖
        entries[(row, column)] = value
        if row != column:
            if symmetry is SymmetryKind.SYMMETRIC:
                entries[(column, row)] = value
            elif symmetry is SymmetryKind.SKEW_SYMMETRIC:
                # int64 下 -INT64_MIN 回绕为自身
                entries[(column, row)] = wrap_int64(-value) if dtype == torch.int64 else -value

    if supplied != declared_nonzeros:
        raise FormatError(
            f"declared nonzero count does not match supplied values "
            f"({declared_nonzeros} declared, {supplied} supplied)"
        )

    matrix = _map_to_csr(entries, rows, columns, dtype)
    logger.debug(
        "converted %dx%d %s matrix: %d lines read, %d stored entries",
        rows, columns, symmetry.value, supplied, matrix.nnz,
    )
    return matrix


def read_integer_matrix(mtx_file: TextIO, metadata: MatrixMetadata) -> CSRMatrix:
    return read_coordinate_matrix(mtx_file, metadata.symmetry, FieldKind.INTEGER.parse, FieldKind.INTEGER.dtype)


def read_real_matrix(mtx_file: TextIO, metadata: MatrixMetadata) -> CSRMatrix:
    return read_coordinate_matrix(mtx_file, metadata.symmetry, FieldKind.REAL.parse, FieldKind.REAL.dtype)


_READERS = {
    FieldKind.INTEGER: read_integer_matrix,
    FieldKind.REAL: read_real_matrix,
}


def read_matrix(mtx_file: TextIO) -> tuple[MatrixMetadata, CSRMatrix]:
    """读取头部并按字段类型分派到对应的转换器。"""
    metadata = classify_header(mtx_file.readline())
    return metadata, _READERS[metadata.field](mtx_file, metadata)


def load_matrix(
    path: Union[str, os.PathLike],
    encoding: Optional[str] = "utf-8",
) -> tuple[MatrixMetadata, CSRMatrix]:
    """打开 .mtx 文件并转换为 CSR；任何异常路径上文件都会被关闭。"""
    with open(path, "r", encoding=encoding) as f:
        return read_matrix(f)
