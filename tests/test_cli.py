import json
import logging

import pytest

from blindex.cli import main


def test_cli_text_report(capsys):
    main(["56", "14", "48", "32"])
    out = capsys.readouterr().out
    assert "Blinding index: 0.2000" in out
    assert "[0.0524, 0.3339]" in out


def test_cli_json(capsys):
    main(["9", "1", "3", "7", "--json"])
    payload = json.loads(capsys.readouterr().out)
    assert set(payload) == {"est", "lwr_ci", "upr_ci", "p_value", "z_value"}
    assert payload["est"] == pytest.approx(0.6)
    assert payload["lwr_ci"] == pytest.approx(0.1705, abs=5e-5)


def test_cli_opposite_guessing_prints_plain_zero(capsys):
    main(["0", "10", "20", "0"])
    out = capsys.readouterr().out
    assert "z-value:        0.0000" in out
    assert "-0.0000" not in out
    assert "[-1.0000, -0.6791]" in out


def test_cli_conf_level(capsys):
    main(["56", "14", "48", "32", "--conf-level", "0.9", "--digits", "2"])
    out = capsys.readouterr().out
    assert "90% CI" in out
    assert "Blinding index: 0.20" in out


def test_cli_verbose_logs_branch(capsys, caplog):
    caplog.set_level(logging.DEBUG, logger="blindex.stats")
    main(["56", "14", "48", "32", "-v"])
    assert "positive branch" in caplog.text
    assert "z*=" in caplog.text


def test_cli_domain_error_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["-50", "50", "50", "50"])
    assert exc_info.value.code == 2
    assert "n_AA cannot be negative" in capsys.readouterr().err


def test_cli_empty_arm_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["0", "0", "5", "5"])
    assert exc_info.value.code == 2
    assert "strictly positive" in capsys.readouterr().err
