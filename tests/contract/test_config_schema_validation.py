from __future__ import annotations

import json

import jsonschema
import pytest
import yaml

from listcompiler.config.loader import SCHEMA_PATH
from tests.workbooks import SAMPLE_CONFIG_YAML


@pytest.fixture()
def schema():
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_sample_config_is_valid(schema):
    jsonschema.validate(yaml.safe_load(SAMPLE_CONFIG_YAML), schema)


def test_list_name_pattern(schema):
    data = yaml.safe_load(SAMPLE_CONFIG_YAML)
    data["catalog_lists"][0]["name"] = "MAIN BRANDLIST"
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, schema)


def test_columns_are_one_based(schema):
    data = yaml.safe_load(SAMPLE_CONFIG_YAML)
    data["catalog_lists"][0]["code_column"] = 0
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, schema)


def test_catalog_lists_not_empty(schema):
    data = yaml.safe_load(SAMPLE_CONFIG_YAML)
    data["catalog_lists"] = []
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, schema)
