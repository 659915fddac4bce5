"""
Baseline OpenAPI rule set

Rules every audit runs in addition to the custom rules in ruleset.yaml.
A custom rule with the same id replaces the baseline rule entirely.
Written for OpenAPI 3.x documents.
"""

HTTP_METHODS = ["get", "put", "post", "delete", "options", "head", "patch", "trace"]

OPERATIONS = [f"$.paths.*.{method}" for method in HTTP_METHODS]

OAS_RULESET = {
    "extends": [],
    "rules": {
        # =====================================================================
        # Info object
        # =====================================================================
        "info-contact": {
            "description": "Info object must have \"contact\" object.",
            "severity": "warn",
            "given": "$.info",
            "then": {"field": "contact", "function": "truthy"},
        },
        "info-description": {
            "description": "Info \"description\" must be present and non-empty string.",
            "severity": "warn",
            "given": "$.info",
            "then": {"field": "description", "function": "truthy"},
        },

        # =====================================================================
        # Document root
        # =====================================================================
        "oas3-api-servers": {
            "description": "OpenAPI \"servers\" must be present and non-empty array.",
            "severity": "warn",
            "given": "$",
            "then": [
                {"field": "servers", "function": "truthy"},
                {"field": "servers", "function": "length", "functionOptions": {"min": 1}},
            ],
        },
        "oas3-server-trailing-slash": {
            "description": "Server URL must not have trailing slash.",
            "severity": "warn",
            "given": "$.servers[*]",
            "then": {"field": "url", "function": "pattern", "functionOptions": {"notMatch": "./$"}},
        },
        "openapi-tags": {
            "description": "OpenAPI object must have non-empty \"tags\" array.",
            "severity": "warn",
            "given": "$",
            "then": [
                {"field": "tags", "function": "truthy"},
                {"field": "tags", "function": "length", "functionOptions": {"min": 1}},
            ],
        },

        # =====================================================================
        # Paths and operations
        # =====================================================================
        "path-keys-no-trailing-slash": {
            "description": "Path must not end with slash.",
            "severity": "warn",
            "given": "$.paths",
            "then": {"field": "@key", "function": "pattern", "functionOptions": {"notMatch": ".+\\/$"}},
        },
        "path-not-include-query": {
            "description": "Path must not include query string.",
            "severity": "warn",
            "given": "$.paths",
            "then": {"field": "@key", "function": "pattern", "functionOptions": {"notMatch": "\\?"}},
        },
        "operation-description": {
            "description": "Operation \"description\" must be present and non-empty string.",
            "severity": "warn",
            "given": OPERATIONS,
            "then": {"field": "description", "function": "truthy"},
        },
        "operation-operationId": {
            "description": "Operation must have \"operationId\".",
            "severity": "warn",
            "given": OPERATIONS,
            "then": {"field": "operationId", "function": "truthy"},
        },
        "operation-tags": {
            "description": "Operation must have non-empty \"tags\" array.",
            "severity": "warn",
            "given": OPERATIONS,
            "then": [
                {"field": "tags", "function": "truthy"},
                {"field": "tags", "function": "length", "functionOptions": {"min": 1}},
            ],
        },
        "operation-success-response": {
            "description": "Operation must have at least one \"2xx\" or \"3xx\" response.",
            "severity": "warn",
            "given": OPERATIONS,
            "then": {"field": "responses", "function": "oasOpSuccessResponse"},
        },

        # =====================================================================
        # Markdown
        # =====================================================================
        "no-eval-in-markdown": {
            "description": "Markdown descriptions must not have \"eval(\".",
            "severity": "warn",
            "given": "$..description",
            "then": {"function": "pattern", "functionOptions": {"notMatch": "eval\\("}},
        },
        "no-script-tags-in-markdown": {
            "description": "Markdown descriptions must not have \"<script>\" tags.",
            "severity": "warn",
            "given": "$..description",
            "then": {"function": "pattern", "functionOptions": {"notMatch": "<script"}},
        },

        # =====================================================================
        # Components
        # =====================================================================
        "oas3-unused-component": {
            "description": "Potentially unused component has been detected.",
            "severity": "warn",
            "given": "$.components.schemas",
            "then": {
                "function": "unreferencedReusableObject",
                "functionOptions": {"reusableObjectsLocation": "#/components/schemas"},
            },
        },
    },
}
