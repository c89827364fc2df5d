import json

import pytest

from levelmap.__main__ import main


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exit_info:
        main(["--version"])
    assert exit_info.value.code == 0
    assert capsys.readouterr().out.strip()


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    main([])
    assert "usage: levelmap" in capsys.readouterr().out


def test_parse_orders_fields(capsys: pytest.CaptureFixture[str]) -> None:
    main(["parse", "--fields", "a,b,c", "c:C/a:x\\/y/b:B"])
    assert capsys.readouterr().out == '{"a": "x/y", "b": "B", "c": "C"}\n'


def test_parse_with_default(capsys: pytest.CaptureFixture[str]) -> None:
    main(["parse", "--fields", "a,b,c", "--default", "_", "A"])
    assert json.loads(capsys.readouterr().out) == {"a": "A", "b": "_", "c": "_"}


def test_format_with_and_without_names(capsys: pytest.CaptureFixture[str]) -> None:
    main(["format", "--fields", "a,b,c", "c=C", "a=A:1"])
    assert capsys.readouterr().out == "a:A\\:1/c:C\n"

    main(["format", "--fields", "a,b", "--no-names", "b=B", "a=A"])
    assert capsys.readouterr().out == "A/B\n"


def test_invalid_arguments_exit_with_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exit_info:
        main(["format", "--fields", "a,a", "a=A"])
    assert exit_info.value.code == 2
    assert "field names must be unique" in capsys.readouterr().err

    with pytest.raises(SystemExit) as exit_info:
        main(["format", "--fields", "a", "A"])
    assert exit_info.value.code == 2
    assert "expected NAME=VALUE" in capsys.readouterr().err
