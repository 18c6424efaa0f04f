"""End-to-end tests for the command-line interface."""

import json
import os
import tempfile

from benefit_cli import create_demo_inputs, main
from benefit_calc.data.storage import save_inputs


class TestCLI:
    def test_demo_prints_results(self, capsys):
        assert main(["--demo", "--sensitivity"]) == 0
        out = capsys.readouterr().out
        assert "RESULTS" in out
        assert "SENSITIVITY ANALYSIS" in out
        assert "Reduced travel time" in out

    def test_demo_quiet(self, capsys):
        assert main(["--demo", "--quiet"]) == 0
        assert capsys.readouterr().out == ""

    def test_load_with_overrides_and_exports(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            case = os.path.join(tmpdir, "case.json")
            saved = os.path.join(tmpdir, "saved.json")
            excel = os.path.join(tmpdir, "results.xlsx")
            tornado = os.path.join(tmpdir, "tornado.png")
            cashflow = os.path.join(tmpdir, "cashflow.png")
            save_inputs(create_demo_inputs(), case)

            code = main(["--load", case, "--quiet", "--discount-rate", "0.05",
                         "--estimate", "pessimistic", "--save", saved,
                         "--excel", excel, "--tornado", tornado,
                         "--cashflow-chart", cashflow])

            assert code == 0
            assert os.path.exists(excel)
            assert os.path.exists(tornado)
            assert os.path.exists(cashflow)
            with open(saved, encoding="utf-8") as f:
                settings = json.load(f)["settings"]
            assert settings["discount_rate"] == 0.05
            assert settings["estimate"] == "pessimistic"

    def test_missing_file_fails(self):
        assert main(["--load", "/nonexistent/case.json", "--quiet"]) == 1

    def test_out_of_range_sensitivity_fails(self):
        assert main(["--demo", "--quiet", "--sensitivity", "90"]) == 1

    def _write_case(self, tmpdir, values):
        path = os.path.join(tmpdir, "case.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"name": "Bad case",
                       "benefits": [{"node_id": "b1", "title": "Benefit", "values": values}]}, f)
        return path

    def test_non_numeric_estimate_fails(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            case = self._write_case(tmpdir, [{"year": 1, "likely": "abc"}])
            assert main(["--load", case, "--quiet"]) == 1

    def test_wrongly_typed_estimate_fails(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            case = self._write_case(tmpdir, [{"year": 1, "likely": [5]}])
            assert main(["--load", case, "--quiet"]) == 1

    def test_unknown_value_keys_are_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            case = self._write_case(tmpdir, [{"year": 1, "likely": 5, "note": "x"}])
            assert main(["--load", case, "--quiet"]) == 0
