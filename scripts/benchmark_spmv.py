"""
Matrix Market 矩阵的 SpMV 串行/并行性能测试。

运行方式:
    python -m scripts.benchmark_spmv path/to/matrix.mtx [--runs 10] [--workers N]
"""

from __future__ import annotations

import argparse
import logging
import sys

import torch

from csrbench import (
    DEFAULT_RUNS,
    MatrixMarketError,
    benchmark,
    generate_test_vector,
    load_matrix,
    spmv_parallel,
    spmv_sequential,
)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="CSR SpMV 串行 vs 并行性能测试")
    parser.add_argument("path", nargs="?", help="Matrix Market (.mtx) 文件路径")
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS, help="每种实现的重复次数")
    parser.add_argument("--workers", type=int, default=None, help="并行实现的线程数（默认 torch.get_num_threads()）")
    parser.add_argument("--seed", type=int, default=None, help="测试向量的随机种子")
    parser.add_argument("--verbose", action="store_true", help="输出 DEBUG 日志")
    args = parser.parse_args(argv)

    if args.path is None:
        print("USAGE: spmv <matrix-path>")
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    print("Loading matrix...")
    try:
        metadata, m = load_matrix(args.path)
    except MatrixMarketError as e:
        print(f"❌ 读取矩阵失败: {e}")
        return 1
    print(f"   形状: {m.row_count}x{m.column_count}，非零元素数: {m.nnz}，字段: {metadata.field.value}，对称性: {metadata.symmetry.value}")

    print("Generating vector...")
    x = generate_test_vector(metadata.field, m.row_count, seed=args.seed)

    workers = args.workers if args.workers is not None else torch.get_num_threads()

    print("Starting sequential benchmark...")
    results = benchmark(lambda: spmv_sequential(m, x), runs=args.runs)
    print("\n" + results.format_report() + "\n")

    print(f"Starting parallel benchmark ({workers} workers)...")
    results = benchmark(lambda: spmv_parallel(m, x, num_workers=workers), runs=args.runs)
    print("\n" + results.format_report())

    return 0


if __name__ == "__main__":
    sys.exit(main())
