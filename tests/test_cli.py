"""Tests for the command line interface."""

import pytest
import yaml
from affordability.cli import main
from affordability.config import DEFAULT_SCENARIO


class TestCli:
    def test_run_defaults(self, capsys):
        main(["run"])
        out = capsys.readouterr().out
        assert "Mortgage Affordability Estimate" in out
        assert "Maximum home price" in out

    def test_run_csv(self, capsys):
        main(["run", "--csv"])
        assert capsys.readouterr().out.startswith("scenario,max_home_price")

    def test_run_state_override(self, capsys):
        main(["run", "--state", "fl"])
        out = capsys.readouterr().out
        assert "Location:        FL" in out
        assert "fallback market data used" in out

    def test_scenarios(self, capsys, tmp_path):
        path = tmp_path / "buyer.yaml"
        path.write_text(yaml.safe_dump(DEFAULT_SCENARIO))
        main(["scenarios", str(path)])
        out = capsys.readouterr().out
        assert "Improvement scenarios:" in out
        assert "Goals:" not in out

    def test_sensitivity(self, capsys):
        main(["sensitivity", "--param", "loan.ltv", "--range", "70,90,10"])
        assert "Sensitivity: loan.ltv" in capsys.readouterr().out

    def test_defaults_is_loadable_yaml(self, capsys):
        main(["defaults"])
        assert yaml.safe_load(capsys.readouterr().out) == DEFAULT_SCENARIO

    def test_missing_config(self, capsys, tmp_path):
        with pytest.raises(SystemExit) as info:
            main(["run", str(tmp_path / "nope.yaml")])
        assert info.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_ineligible_borrower(self, capsys, tmp_path):
        path = tmp_path / "buyer.yaml"
        data = {**DEFAULT_SCENARIO, "borrower": {**DEFAULT_SCENARIO["borrower"], "fico_score": 580}}
        path.write_text(yaml.safe_dump(data))
        main(["run", str(path)])
        out = capsys.readouterr().out
        assert "Ineligible: Conventional loans require a FICO score of at least 620" in out
        assert "Switch to FHA" in out
        assert "Raise FICO by 40 points" in out

    def test_invalid_score(self, capsys, tmp_path):
        path = tmp_path / "buyer.yaml"
        data = {**DEFAULT_SCENARIO, "borrower": {**DEFAULT_SCENARIO["borrower"], "fico_score": 900}}
        path.write_text(yaml.safe_dump(data))
        with pytest.raises(SystemExit):
            main(["run", str(path)])
        assert "between 300 and 850" in capsys.readouterr().err

    def test_bad_range(self, capsys):
        with pytest.raises(SystemExit):
            main(["sensitivity", "--param", "loan.ltv", "--range", "70,90"])
        assert "--range" in capsys.readouterr().err
