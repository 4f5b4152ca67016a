import pytest

from html_to_pdf.dependencies import (
    DependencyChecker,
    ensure_executable,
    get_install_instructions,
    resolve_executable,
)
from html_to_pdf.errors import ConfigurationError, NoExecutableError

from conftest import VERSION_ENGINE


def test_ensure_executable_finds_absolute_path(make_engine):
    engine = make_engine(VERSION_ENGINE)
    assert ensure_executable(str(engine)) == engine


def test_ensure_executable_searches_path_for_bare_names(make_engine, monkeypatch):
    engine = make_engine(VERSION_ENGINE, name="fake-wkhtmltopdf")
    monkeypatch.setenv("PATH", str(engine.parent))
    assert ensure_executable("fake-wkhtmltopdf") == engine


def test_missing_executable_is_a_configuration_error(tmp_path):
    with pytest.raises(NoExecutableError) as excinfo:
        ensure_executable(str(tmp_path / "wkhtmltopdf"))
    assert isinstance(excinfo.value, ConfigurationError)
    assert str(tmp_path / "wkhtmltopdf") in str(excinfo.value)


def test_resolve_executable(make_engine, tmp_path):
    engine = make_engine(VERSION_ENGINE)
    assert resolve_executable("wkhtmltopdf") == "wkhtmltopdf"
    assert resolve_executable(str(engine)) == str(engine)
    assert resolve_executable(str(tmp_path / "gone" / "wkhtmltopdf")) == "wkhtmltopdf"


def test_install_instructions_per_platform():
    assert "brew" in get_install_instructions("Darwin")
    assert "apt-get" in get_install_instructions("Linux")
    assert "wkhtmltopdf.org" in get_install_instructions("Windows")


def test_checker_reports_version(make_engine, capsys):
    engine = make_engine(VERSION_ENGINE)
    checker = DependencyChecker(str(engine))

    assert checker.print_summary() is True
    out = capsys.readouterr().out
    assert "wkhtmltopdf 0.12.6 (fake)" in out
    assert "All dependencies are available!" in out


def test_checker_reports_missing_executable(tmp_path, capsys):
    checker = DependencyChecker(str(tmp_path / "wkhtmltopdf"))

    assert checker.print_summary() is False
    assert "[MISSING]" in capsys.readouterr().out
    assert checker.missing_external_tools[0][0] == "wkhtmltopdf"
