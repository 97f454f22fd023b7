import os
import pytest

import schema_loader
from gen_lsp import main, parse_arguments, LspAnnotationConverter, DEFAULT_LSP_VERSION, DEFAULT_OUTPUT_FILE


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for name in ("GEN_LSP_VERSION", "GEN_LSP_OUT", "GEN_LSP_SCHEMA", "GEN_LSP_PROTOCOL_FILE", "GEN_LSP_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


def test_no_command_prints_usage(capsys):
    assert main([]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_defaults():
    args = parse_arguments(["gen"])
    assert args.command == "gen"
    assert args.version == DEFAULT_LSP_VERSION
    assert args.out == DEFAULT_OUTPUT_FILE
    assert args.methods is False and args.capabilities is False


def test_unknown_flag_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["gen", "--frobnicate"])
    assert excinfo.value.code == 2


def test_more_than_one_command_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["gen", "gen"])
    assert excinfo.value.code == 2


def test_unknown_command_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["build"])
    assert excinfo.value.code == 2


def test_missing_flag_value_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["gen", "--out"])
    assert excinfo.value.code == 2


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEN_LSP_VERSION", "3.17")
    monkeypatch.setenv("GEN_LSP_VERBOSE", "1")
    args = parse_arguments(["gen", "--version", "3.18"])
    assert args.version == "3.17"
    assert args.verbose is True


def test_gen_from_local_schema(temp_dir, meta_model_path):
    out = os.path.join(temp_dir, "meta.lua")
    protocol_file = os.path.join(temp_dir, "protocol.lua")
    with open(protocol_file, "w", encoding="utf-8") as f:
        f.write("local protocol = {}\n")
    rc = main(["gen", "--schema", meta_model_path, "--out", out, "--protocol-file", protocol_file,
               "--methods", "--capabilities"])
    assert rc == 0
    with open(out, "r", encoding="utf-8") as f:
        meta = f.read()
    assert "---@class lsp.ServerCapabilities" in meta
    with open(protocol_file, "r", encoding="utf-8") as f:
        patched = f.read()
    assert patched.startswith("local protocol = {}\n-- Generated by gen_lsp.py")
    assert "  textDocument_hover = 'textDocument/hover'," in patched


def test_protocol_file_untouched_without_flags(temp_dir, meta_model_path):
    out = os.path.join(temp_dir, "meta.lua")
    protocol_file = os.path.join(temp_dir, "protocol.lua")
    assert main(["gen", "--schema", meta_model_path, "--out", out, "--protocol-file", protocol_file]) == 0
    assert os.path.exists(out)
    assert not os.path.exists(protocol_file)


def test_regeneration_is_byte_identical(temp_dir, meta_model_path):
    out = os.path.join(temp_dir, "meta.lua")
    protocol_file = os.path.join(temp_dir, "protocol.lua")
    argv = ["gen", "--schema", meta_model_path, "--out", out, "--protocol-file", protocol_file, "--methods", "--capabilities"]
    assert main(argv) == 0
    with open(out, "rb") as f:
        meta_first = f.read()
    with open(protocol_file, "rb") as f:
        protocol_first = f.read()
    assert main(argv) == 0
    with open(out, "rb") as f:
        assert f.read() == meta_first
    with open(protocol_file, "rb") as f:
        assert f.read() == protocol_first


def test_fetch_failure_aborts_before_output(temp_dir, monkeypatch, capsys):
    class ShortResponse:
        status_code = 404
        text = "404: Not Found"

    monkeypatch.setattr(schema_loader.requests, "get", lambda url, timeout: ShortResponse())
    out = os.path.join(temp_dir, "meta.lua")
    assert main(["gen", "--version", "0.0", "--out", out]) == 1
    assert not os.path.exists(out)
    captured = capsys.readouterr()
    assert "URL failed" in captured.out
    assert "404: Not Found" in captured.err


def test_write_failure_is_reported(temp_dir, meta_model_path, capsys):
    out = os.path.join(temp_dir, "missing_dir", "meta.lua")
    converter = LspAnnotationConverter(output_file=out, schema_path=meta_model_path)
    assert converter.load_schema()
    assert converter.generate_annotations() is False
    assert out in capsys.readouterr().out


def test_generate_without_schema_fails(capsys):
    converter = LspAnnotationConverter()
    assert converter.generate_annotations() is False
    assert converter.generate_protocol_tables(True, False) is False
    assert converter.generate_protocol_tables(False, False) is True
