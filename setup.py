from setuptools import setup, find_packages

setup(
    name="auditapi",
    version="1.0.0",
    description="Audit OpenAPI contracts against a configurable rule set and grade their quality",
    author="AuditAPI Contributors",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "auditapi": ["defaults/*.yaml"],
    },
    install_requires=[
        "pyyaml>=6.0",
        "jsonschema>=4.20.0",
        "jsonpath-ng>=1.6.0",
        "openapi-spec-validator>=0.7.1",
        "jsonschema-path>=0.3.1",
        "click>=8.1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "auditapi=auditapi.cli:main",
        ],
    },
    python_requires=">=3.8",
)
