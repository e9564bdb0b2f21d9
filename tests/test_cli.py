import main_c
import main_e


def _write(path, data):
    path.write_bytes(data)
    return str(path)


def test_compress_then_expand(tmp_path, capsys):
    data = b"The rain in Spain stays mainly in the plain.\n" * 40
    source = _write(tmp_path / "in.txt", data)
    packed = str(tmp_path / "in.huf")
    restored = str(tmp_path / "out.txt")

    assert main_c.main(["main_c", source, packed]) == 0
    out = capsys.readouterr().out
    assert "CompressFile" in out
    assert "Compression ratio:" in out

    assert main_e.main(["main_e", packed, restored]) == 0
    assert "ExpandFile" in capsys.readouterr().out
    assert (tmp_path / "out.txt").read_bytes() == data


def test_empty_file(tmp_path):
    source = _write(tmp_path / "empty", b"")
    packed = str(tmp_path / "empty.huf")
    restored = str(tmp_path / "empty.out")
    assert main_c.main(["main_c", source, packed]) == 0
    assert main_e.main(["main_e", packed, restored]) == 0
    assert (tmp_path / "empty.out").read_bytes() == b""


def test_dump_flag(tmp_path, capsys):
    source = _write(tmp_path / "aab", b"AAB")
    assert main_c.main(["main_c", source, str(tmp_path / "aab.huf"), "-d"]) == 0
    out = capsys.readouterr().out
    assert "node='A'" in out
    assert "node=EOF" in out


def test_unused_argument_reported(tmp_path, capsys):
    source = _write(tmp_path / "x", b"x")
    assert main_c.main(["main_c", source, str(tmp_path / "x.huf"), "-q"]) == 0
    assert "Unused argument: -q" in capsys.readouterr().out


def test_usage(capsys):
    assert main_c.main(["/usr/bin/main_c.py"]) == 0
    assert "Usage:  main_c infile outfile" in capsys.readouterr().out


def test_missing_input(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    assert main_c.main(["main_c", missing, str(tmp_path / "o")]) == 1
    assert f"File '{missing}' not found" in capsys.readouterr().out
    assert main_e.main(["main_e", missing, str(tmp_path / "o")]) == 1
    assert f"File '{missing}' not found" in capsys.readouterr().out


def test_missing_output_directory_named(tmp_path, capsys):
    source = _write(tmp_path / "in", b"some data")
    bad_output = str(tmp_path / "no_such_dir" / "out.huf")
    assert main_c.main(["main_c", source, bad_output]) == 1
    out = capsys.readouterr().out
    assert f"File '{bad_output}' not found" in out
    assert source not in out


def test_expand_rejects_bad_magic(tmp_path, capsys):
    source = _write(tmp_path / "bogus.huf", b"not a huffman file")
    restored = tmp_path / "bogus.out"
    assert main_e.main(["main_e", source, str(restored)]) == 1
    assert "illegal header" in capsys.readouterr().out
    assert restored.read_bytes() == b""
