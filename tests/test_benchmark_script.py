from scripts.benchmark_spmv import main


def test_usage_without_path(capsys):
    assert main([]) == 0
    assert "USAGE" in capsys.readouterr().out


def test_runs_both_benchmarks(tmp_path, capsys):
    path = tmp_path / "m.mtx"
    path.write_text(
        "%%MatrixMarket matrix coordinate real symmetric\n"
        "3 3 3\n"
        "1 1 1.0\n"
        "2 1 0.5\n"
        "3 3 -2.0\n"
    )

    assert main([str(path), "--runs", "3", "--workers", "2", "--seed", "0"]) == 0
    out = capsys.readouterr().out
    assert "Starting sequential benchmark..." in out
    assert "Starting parallel benchmark (2 workers)..." in out
    assert out.count("90th percentile:") == 2


def test_reports_format_error(tmp_path, capsys):
    path = tmp_path / "bad.mtx"
    path.write_text("%%MatrixMarket matrix array real general\n1 1\n1.0\n")

    assert main([str(path)]) == 1
    assert "layout 'array' is not supported" in capsys.readouterr().out


def test_reports_out_of_range_integer(tmp_path, capsys):
    path = tmp_path / "big.mtx"
    path.write_text(
        "%%MatrixMarket matrix coordinate integer general\n"
        "1 1 1\n"
        "1 1 99999999999999999999\n"
    )

    assert main([str(path)]) == 1
    assert "data line malformed" in capsys.readouterr().out
