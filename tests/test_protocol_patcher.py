import os
from lsp_model import Protocol, Request
from generators.method_table_generator import generate_protocol_block
from protocol_patcher import patch_protocol_content, patch_protocol_file, find_marker_offset

HAND_WRITTEN = """local protocol = {}

function protocol.make_client_capabilities()
  return {}
end
"""


def test_block_appended_when_no_marker():
    block = "-- Generated by gen_lsp.py, keep at end of file.\nprotocol.Methods = {}\n\nreturn protocol\n"
    new = patch_protocol_content(HAND_WRITTEN, block)
    assert new == HAND_WRITTEN + block


def test_everything_after_marker_is_replaced():
    old = HAND_WRITTEN + "-- Generated by an older script\nprotocol.Methods = { old = 'old' }\nreturn protocol\n"
    block = "-- Generated by gen_lsp.py, keep at end of file.\nprotocol.Methods = {}\nreturn protocol\n"
    new = patch_protocol_content(old, block)
    assert new == HAND_WRITTEN + block
    assert "old = 'old'" not in new


def test_first_marker_wins():
    content = "a\n-- Generated by x\nb\n-- Generated by y\n"
    assert find_marker_offset(content) == 2
    assert find_marker_offset("a\nb\n") is None
    # only a real line start counts
    assert find_marker_offset("x = 1 -- Generated by hand\n") is None


def test_patch_is_idempotent(protocol):
    block = generate_protocol_block(protocol, True, True)
    once = patch_protocol_content(HAND_WRITTEN, block)
    twice = patch_protocol_content(once, block)
    assert once == twice


def test_patch_is_idempotent_with_capabilities_only(protocol):
    block = generate_protocol_block(protocol, False, True)
    once = patch_protocol_content(HAND_WRITTEN, block)
    assert patch_protocol_content(once, block) == once


def test_patch_protocol_file(temp_dir, protocol):
    path = os.path.join(temp_dir, "protocol.lua")
    with open(path, "w", encoding="utf-8") as f:
        f.write(HAND_WRITTEN)
    block = generate_protocol_block(protocol, True, False)
    patch_protocol_file(path, block)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    assert content.startswith(HAND_WRITTEN)
    assert content.endswith("return protocol\n")


def test_hand_written_part_is_kept_verbatim():
    hand_written = "-- section\x0cbreak\nlocal s = 'a\u2028b'\r\nlocal t = '\x1c\x85\u2029'\n"
    block = "-- Generated by gen_lsp.py, keep at end of file.\nreturn protocol\n"
    once = patch_protocol_content(hand_written, block)
    assert once == hand_written + block
    assert patch_protocol_content(once, block) == once


def test_hand_written_part_without_trailing_newline():
    block = "-- Generated by gen_lsp.py, keep at end of file.\nreturn protocol\n"
    assert patch_protocol_content("local protocol = {}", block) == "local protocol = {}\n" + block
    assert patch_protocol_content("", block) == block


def test_line_separator_in_method_docs_stays_in_comment():
    p = Protocol([Request("textDocument/hover", "clientToServer", documentation="First\u2028second line")], [], [], [], [])
    block = generate_protocol_block(p, True, False)
    patched = patch_protocol_content(HAND_WRITTEN, block)
    lines = patched.split("\n")
    assert "  --- First\u2028second line" in lines
    assert "second line" not in lines
    assert patch_protocol_content(patched, block) == patched


def test_patch_protocol_file_keeps_unusual_characters(temp_dir, protocol):
    path = os.path.join(temp_dir, "protocol.lua")
    hand_written = "-- section\x0cbreak\nlocal s = 'a\u2028b'\n"
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(hand_written)
    block = generate_protocol_block(protocol, True, True)
    patch_protocol_file(path, block)
    with open(path, "r", encoding="utf-8", newline="") as f:
        assert f.read() == hand_written + block
