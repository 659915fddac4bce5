"""Rule categorization tests"""

import pytest

from auditapi.categories import classify


class TestClassify:
    """classify()"""

    @pytest.mark.parametrize("rule_id, expected", [
        ("sec-https-only", "security"),
        ("com-operation-summary", "completeness"),
        ("str-path-kebab-case", "structure"),
        ("cns-consistent-casing", "consistency"),
    ])
    def test_prefix(self, rule_id, expected):
        assert classify(rule_id) == expected

    def test_unprefixed_rules_default_to_completeness(self):
        assert classify("operation-operationId") == "completeness"
        assert classify("info-contact", []) == "completeness"

    def test_tag_wins_over_prefix(self):
        assert classify("str-something", ["security"]) == "security"

    def test_tag_priority_order(self):
        assert classify("rule", ["consistency", "structure"]) == "structure"
        assert classify("rule", ["consistency", "completeness", "security"]) == "security"

    def test_unknown_tags_fall_back_to_prefix(self):
        assert classify("cns-naming", ["style", "naming"]) == "consistency"

    def test_architecture_is_never_assigned(self):
        assert classify("arch-layering", ["architecture"]) == "completeness"

    def test_numeric_rule_id(self):
        # YAML reads an unquoted 404: key as an int
        assert classify(404) == "completeness"
        assert classify(404, ["security"]) == "security"
