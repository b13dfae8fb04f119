"""
Pytest configuration and shared fixtures for the masking tests.

The default fixtures mirror a typical service setup: masking enabled,
PARTIAL style, '*' as mask character and a handful of sensitive names.
"""

import os
import sys

import pytest

# Add parent directory to path for package imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from masking import FieldSensitivityResolver, MaskConfig, MaskStyle, ObjectMasker, StyleEngine  # noqa: E402

SENSITIVE_FIELDS = ("email", "phoneNumber", "ssn", "creditCardNumber", "password")


@pytest.fixture(autouse=True)
def clear_masking_environment(monkeypatch):
    """Keep MASKING_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("MASKING_"):
            monkeypatch.delenv(key)
    yield
    # load_dotenv writes to os.environ directly
    for key in list(os.environ):
        if key.startswith("MASKING_"):
            del os.environ[key]


@pytest.fixture
def config():
    """Masking enabled, PARTIAL style, '*' character."""
    return MaskConfig(
        enabled=True,
        fields=SENSITIVE_FIELDS,
        mask_style=MaskStyle.PARTIAL,
        mask_character="*",
    )


@pytest.fixture
def disabled_config():
    return MaskConfig(enabled=False, fields=SENSITIVE_FIELDS)


@pytest.fixture
def style_engine(config):
    return StyleEngine(config)


@pytest.fixture
def resolver(config):
    return FieldSensitivityResolver(config)


@pytest.fixture
def masker(config):
    return ObjectMasker(config)
