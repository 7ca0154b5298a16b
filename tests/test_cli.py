"""
Tests for the command line interface.
"""

import pytest

from pyregdiag import __version__
from pyregdiag.__main__ import build_parser, main


class TestParser:

    def test_subcommands(self):
        parser = build_parser()
        args = parser.parse_args(["robust", "--seed", "3"])
        assert args.command == "robust"
        assert args.seed == 3
        assert args.plot_dir is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out


class TestCommands:

    def test_list(self, capsys):
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        for name in ("cars", "corrosion", "longley", "stackloss", "strongx"):
            assert name in out

    def test_show(self, capsys):
        assert main(["show", "corrosion"]) == 0
        assert "loss" in capsys.readouterr().out

    def test_show_unknown_dataset(self, capsys):
        assert main(["show", "iris"]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_gls(self, capsys):
        assert main(["gls"]) == 0
        out = capsys.readouterr().out
        assert "Durbin-Watson" in out
        assert "Correlation Structure: AR(1)" in out

    def test_wls(self, capsys):
        assert main(["wls"]) == 0
        out = capsys.readouterr().out
        assert "Breusch-Pagan" in out
        assert "Weighted Least Squares" in out

    def test_lack_of_fit(self, capsys):
        assert main(["lack-of-fit"]) == 0
        assert "Pure error" in capsys.readouterr().out

    def test_robust(self, capsys):
        assert main(["robust"]) == 0
        out = capsys.readouterr().out
        assert "Bonferroni outlier test" in out
        assert "Least trimmed squares" in out
        assert "LAD (median) regression" in out

    def test_plot_dir(self, tmp_path, capsys):
        assert main(["lack-of-fit", "--plot-dir", str(tmp_path)]) == 0
        assert any(tmp_path.glob("*.png"))
        assert "saved" in capsys.readouterr().out
