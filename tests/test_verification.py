import hashlib

from html_to_pdf.verification import calculate_file_hash, is_complete, verify_file_complete


def test_complete_when_eof_precedes_final_byte():
    assert is_complete(b"%PDF-1.4\n...\n%%EOF\n")
    assert is_complete(b"EOF\n")
    assert is_complete("%%EOF\r")


def test_incomplete_outputs():
    assert not is_complete(b"")
    assert not is_complete(b"EOF")
    assert not is_complete(b"%PDF-1.4\npartial\n")
    assert not is_complete(b"%%EOF\n\n")


def test_verify_file_complete(tmp_path):
    done = tmp_path / "done.pdf"
    done.write_bytes(b"%PDF-1.4\n%%EOF\n")
    partial = tmp_path / "partial.pdf"
    partial.write_bytes(b"%PDF")

    assert verify_file_complete(done)
    assert not verify_file_complete(partial)
    assert not verify_file_complete(tmp_path / "missing.pdf")


def test_calculate_file_hash(tmp_path):
    path = tmp_path / "out.pdf"
    path.write_bytes(b"%PDF-1.4\n%%EOF\n")
    assert calculate_file_hash(path) == hashlib.sha256(b"%PDF-1.4\n%%EOF\n").hexdigest()
