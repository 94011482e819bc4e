"""Matrix Market 解析过程中抛出的异常。"""

from __future__ import annotations

from typing import Optional


class MatrixMarketError(Exception):
    """Base exception for all matrix description errors."""

    pass


class FormatError(MatrixMarketError, ValueError):
    """
    头部、size 行或数据行格式不合法，或声明的非零数与实际不符。

    `line_number` 为出错行在输入中的 1-based 行号（未知时为 None）。
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class RangeError(MatrixMarketError, IndexError):
    """坐标超出 size 行声明的矩阵维度。"""

    def __init__(
        self,
        row: int,
        column: int,
        shape: tuple[int, int],
        line_number: Optional[int] = None,
        message: Optional[str] = None,
    ):
        self.row = row
        self.column = column
        self.shape = shape
        self.line_number = line_number

        if message is None:
            message = (
                f"coordinate outside declared dimensions: "
                f"({row + 1}, {column + 1}) not in {shape[0]}x{shape[1]}"
            )
        if line_number is not None:
            message = f"{message} (line {line_number})"

        super().__init__(message)
