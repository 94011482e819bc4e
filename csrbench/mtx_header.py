"""
Matrix Market 头部识别。

只支持 `matrix coordinate {integer|real} {general|symmetric|skew-symmetric}`，
其余组合一律抛出 FormatError。
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Union

import torch

from csrbench.errors import FormatError


logger = logging.getLogger(__name__)

MAGIC_MARKERS = ("%matrixmarket", "%%matrixmarket")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def check_int64(value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer {value} does not fit in int64")
    return value


def wrap_int64(value: int) -> int:
    """按 int64 补码语义截断（溢出回绕）。"""
    value &= 0xFFFFFFFFFFFFFFFF
    return value - (1 << 64) if value > INT64_MAX else value


class FieldKind(enum.Enum):
    INTEGER = "integer"
    REAL = "real"

    @property
    def dtype(self) -> torch.dtype:
        """该字段类型对应的 values 张量 dtype。"""
        return torch.int64 if self is FieldKind.INTEGER else torch.float64

    def parse(self, literal: str) -> Union[int, float]:
        if self is FieldKind.INTEGER:
            return check_int64(int(literal))
        return float(literal)


class SymmetryKind(enum.Enum):
    GENERAL = "general"
    SYMMETRIC = "symmetric"
    SKEW_SYMMETRIC = "skew-symmetric"


@dataclass(frozen=True)
class MatrixMetadata:
    field: FieldKind
    symmetry: SymmetryKind


def classify_header(header: str) -> MatrixMetadata:
    """
    解析 Matrix Market 文件的第一行。

    Args:
        header: 头部字符串，大小写不敏感

    Returns:
        MatrixMetadata(field, symmetry)

    Raises:
        FormatError: 头部不是受支持的矩阵描述
    """
    tokens = header.lower().split()

    if len(tokens) != 5 or tokens[0] not in MAGIC_MARKERS:
        raise FormatError("not a recognized matrix description")

    object_kind, layout, field_str, symmetry_str = tokens[1:]

    if object_kind != "matrix":
        raise FormatError(f"object kind '{object_kind}' is not supported")

    try:
        field = FieldKind(field_str)
    except ValueError:
        raise FormatError(f"field kind '{field_str}' is not supported") from None

    try:
        symmetry = SymmetryKind(symmetry_str)
    except ValueError:
        raise FormatError(f"symmetry kind '{symmetry_str}' is not supported") from None

    # 存储格式最后检查
    if layout != "coordinate":
        raise FormatError(f"layout '{layout}' is not supported")

    metadata = MatrixMetadata(field=field, symmetry=symmetry)
    logger.debug("classified header: %s", metadata)
    return metadata
