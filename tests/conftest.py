
import sys
import os
import json
from tempfile import TemporaryDirectory
import pytest
# Ensure the project root is on sys.path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from lsp_model import build_protocol

META_MODEL_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "test_meta_model.json")

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with TemporaryDirectory() as dir_path:
        yield dir_path

@pytest.fixture
def meta_model_path():
    return META_MODEL_PATH

@pytest.fixture
def meta_model_data():
    with open(META_MODEL_PATH, "r", encoding="utf-8") as f:
        return json.load(f)

@pytest.fixture
def protocol(meta_model_data):
    return build_protocol(meta_model_data)
