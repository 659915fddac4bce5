"""Shared fixtures for the AuditAPI test suite"""

import copy
from pathlib import Path

import pytest
import yaml

from auditapi.validation import validate_scoring_config


SCORING = {
    "base_score": 100,
    "weights": {
        "security": 0.30,
        "completeness": 0.25,
        "structure": 0.20,
        "consistency": 0.15,
        "architecture": 0.10,
    },
    "penalties": {
        "com-summary": {"points": 30, "fatal": False},
        "sec-api-key-in-query": {"points": 50, "fatal": True},
    },
    "grading_scale": {
        "A": {"min": 90, "max": 100},
        "B": {"min": 80, "max": 89},
        "C": {"min": 70, "max": 79},
        "D": {"min": 60, "max": 69},
        "F": {"min": 0, "max": 59},
    },
}

RULESET = {
    "extends": ["spectral:oas"],
    "rules": {
        "com-summary": {
            "description": "Operations should have a summary.",
            "severity": "warn",
            "given": "$.paths.*.get",
            "then": {"field": "summary", "function": "truthy"},
        },
        "sec-api-key-in-query": {
            "description": "API keys must not be sent in the query string.",
            "severity": "error",
            "given": "$.components.securitySchemes.*",
            "then": {"field": "in", "function": "pattern", "functionOptions": {"notMatch": "^query$"}},
        },
        "cns-consistent-casing": {
            "description": "Property names should follow one casing convention.",
            "severity": "warn",
            "given": "$.components.schemas",
            "then": {"function": "consistentCasing"},
        },
    },
}

CLEAN_SPEC = """\
openapi: 3.0.3
info:
  title: Pet Store
  version: "1.0.0"
  description: Manage pets.
  contact:
    name: API Team
servers:
  - url: https://api.example.com
tags:
  - name: pets
paths:
  /pets:
    get:
      operationId: listPets
      summary: List pets
      description: Returns every pet.
      tags:
        - pets
      responses:
        "200":
          description: A list of pets.
          content:
            application/json:
              schema:
                type: array
                items:
                  $ref: "#/components/schemas/Pet"
components:
  schemas:
    Pet:
      type: object
      required:
        - petId
      properties:
        petId:
          type: integer
        petName:
          type: string
"""

CASING_SPEC = CLEAN_SPEC + """\
        birthDate:
          type: string
        owner_id:
          type: integer
        created_at:
          type: string
"""

FATAL_SPEC = CLEAN_SPEC + """\
  securitySchemes:
    apiKey:
      type: apiKey
      in: query
      name: api_key
security:
  - apiKey: []
"""


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def scoring_dict():
    """A fresh, valid scoring.yaml mapping the test may modify"""
    return copy.deepcopy(SCORING)


@pytest.fixture
def ruleset_dict():
    return copy.deepcopy(RULESET)


@pytest.fixture
def scoring_config(scoring_dict):
    return validate_scoring_config(scoring_dict).data


@pytest.fixture
def config_dir(tmp_path, scoring_dict, ruleset_dict):
    """Config directory holding the test scoring.yaml and ruleset.yaml"""
    directory = tmp_path / "config"
    directory.mkdir()
    write_yaml(directory / "scoring.yaml", scoring_dict)
    write_yaml(directory / "ruleset.yaml", ruleset_dict)
    return directory


@pytest.fixture
def spec_file(tmp_path):
    """Factory writing an OpenAPI document into tmp_path"""
    def _write(content: str = CLEAN_SPEC, name: str = "openapi.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
