import convert_html_to_pdf

from conftest import ECHO_ENGINE, FAILING_ENGINE, FAKE_PDF, VERSION_ENGINE


def test_converts_to_output_file(make_engine, tmp_path, capsys):
    engine = make_engine(ECHO_ENGINE)
    page = tmp_path / "page.html"
    page.write_text("<html><body>cli</body></html>")
    target = tmp_path / "page.pdf"

    code = convert_html_to_pdf.main([
        str(page), "-o", str(target), "--wkhtmltopdf", str(engine),
        "--option", "page_size=A4", "--flag", "grayscale",
    ])

    assert code == 0
    assert target.read_bytes() == FAKE_PDF
    assert "[OK]" in capsys.readouterr().err


def test_engine_failure_exits_with_error(make_engine, tmp_path, capsys):
    engine = make_engine(FAILING_ENGINE)
    code = convert_html_to_pdf.main([
        "https://example.com", "-o", str(tmp_path / "x.pdf"), "--wkhtmltopdf", str(engine),
    ])

    assert code == 1
    assert "Command failed" in capsys.readouterr().err


def test_missing_executable_exits_with_error(tmp_path, capsys):
    code = convert_html_to_pdf.main([
        "https://example.com", "-o", str(tmp_path / "x.pdf"), "--wkhtmltopdf", str(tmp_path / "nope"),
    ])

    assert code == 1
    assert "No wkhtmltopdf executable found" in capsys.readouterr().err


def test_bad_option_pair(make_engine, tmp_path):
    engine = make_engine(ECHO_ENGINE)
    code = convert_html_to_pdf.main([
        "https://example.com", "-o", str(tmp_path / "x.pdf"), "--wkhtmltopdf", str(engine),
        "--option", "page_size",
    ])

    assert code == 2


def test_check_deps(make_engine):
    engine = make_engine(VERSION_ENGINE)
    assert convert_html_to_pdf.main(["--check-deps", "--wkhtmltopdf", str(engine)]) == 0


def test_parse_option_pairs():
    options = convert_html_to_pdf.parse_option_pairs(["page_size=A4", "title=a=b"], ["grayscale"])
    assert options == {"page_size": "A4", "title": "a=b", "grayscale": True}
