# schema_loader.py
# Reads the LSP metaModel.json, either from the upstream repository or from a local file,
# and turns it into a Protocol.
import json
import os
from typing import Optional

import requests

from lsp_model import Protocol, build_protocol

META_MODEL_URL = (
    "https://raw.githubusercontent.com/microsoft/language-server-protocol/"
    "gh-pages/_specifications/lsp/{version}/metaModel/metaModel.json"
)
DEFAULT_TIMEOUT = 30
# Anything shorter than this is an error page, not a metaModel.
MIN_SCHEMA_BYTES = 999


class SchemaFetchError(RuntimeError):
    """The metaModel could not be retrieved. `body` holds whatever came back."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


class SchemaFormatError(ValueError):
    pass


def meta_model_url(version: str) -> str:
    return META_MODEL_URL.format(version=version)


def fetch_schema_text(version: str, timeout: float = DEFAULT_TIMEOUT, verbose: bool = False) -> str:
    """
    Download metaModel.json for the given protocol version.
    Raises SchemaFetchError on transport errors, non-200 responses or a suspiciously short body.
    """
    url = meta_model_url(version)
    print(f"Reading {url}")
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise SchemaFetchError(f"URL failed: {url} ({e})") from e
    body = response.text or ''
    if verbose:
        print(f"[DEBUG] fetch_schema_text: status={response.status_code} bytes={len(body)}")
    if response.status_code != 200 or len(body) < MIN_SCHEMA_BYTES:
        raise SchemaFetchError(f"URL failed: {url} (status {response.status_code}, {len(body)} bytes)", body)
    return body


def read_schema_text(schema_path: str) -> str:
    if not os.path.exists(schema_path):
        raise SchemaFetchError(f"Schema file '{schema_path}' does not exist.")
    with open(schema_path, 'r', encoding='utf-8') as f:
        text = f.read()
    if len(text) < MIN_SCHEMA_BYTES:
        raise SchemaFetchError(f"Schema file '{schema_path}' is too short ({len(text)} bytes)", text)
    return text


def parse_schema_text(text: str) -> Protocol:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaFormatError(f"metaModel is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SchemaFormatError(f"metaModel must be a JSON object, got {type(data).__name__}")
    return build_protocol(data)


def load_protocol(version: str, schema_path: Optional[str] = None, verbose: bool = False) -> Protocol:
    """Convenience entry point: local file when schema_path is given, otherwise fetch by version."""
    if schema_path:
        text = read_schema_text(schema_path)
    else:
        text = fetch_schema_text(version, verbose=verbose)
    return parse_schema_text(text)
