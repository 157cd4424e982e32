"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import json
import pytest
from typing import Any, Dict, List

from eph_billing.config import EngineSettings, reload_config, reset_logging
from eph_billing.models import BillingConfig, RawEntry
from eph_billing.models.billing_config import DEFAULT_DOCUMENT


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'WARNING',
        'HOURS_DECIMAL_PLACES': '1',
        'CURRENCY_DECIMAL_PLACES': '2',
    }


@pytest.fixture(autouse=True)
def mock_env(test_env_vars, monkeypatch):
    """Isolate every test from the developer's environment and .env file."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv('BILLING_CONFIG_FILE', raising=False)
    for key in ('LOG_FORMAT', 'LOG_FILE', 'LOG_FILE_ENABLED', 'LOG_CONSOLE'):
        monkeypatch.delenv(key, raising=False)

    # Clear the global config to force reload with test values
    import eph_billing.config.settings
    eph_billing.config.settings._config = None

    yield test_env_vars

    # Clean up
    eph_billing.config.settings._config = None
    reset_logging()


@pytest.fixture
def test_config(mock_env) -> EngineSettings:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def billing_config() -> BillingConfig:
    """Default tenant billing configuration."""
    return BillingConfig.default()


def make_entry(**overrides: Any) -> RawEntry:
    """Build a RawEntry with sensible defaults (Monday 2024-03-04, 8 hours)."""
    values: Dict[str, Any] = {
        'date': dt.date(2024, 3, 4),
        'subject_key': 'EX-01',
        'author_role': 'operator',
        'total_hours': '8',
    }
    values.update(overrides)
    return RawEntry(**values)


@pytest.fixture
def entry_factory():
    """Factory for RawEntry objects."""
    return make_entry


def make_config(**sections: Any) -> BillingConfig:
    """Stored configuration: the default document with some sections replaced."""
    return BillingConfig.from_document({**DEFAULT_DOCUMENT, **sections})


@pytest.fixture
def config_factory():
    """Factory for stored BillingConfig documents."""
    return make_config


@pytest.fixture
def sample_entry_documents() -> List[Dict[str, Any]]:
    """Entry documents as exported from the fleet app (camelCase keys)."""
    return [
        {
            'id': 'op-1',
            'date': '2024-03-04',
            'subjectKey': 'EX-01',
            'authorRole': 'Operator',
            'startTime': '07:00',
            'endTime': '16:00',
            'assetId': 'EX-01',
            'assetType': 'Excavator',
            'operatorName': 'Sam Dlamini',
        },
        {
            'id': 'pm-1',
            'date': '2024-03-04',
            'subjectKey': 'EX-01',
            'authorRole': 'Plant Manager',
            'startTime': '07:00',
            'endTime': '15:00',
            'hasOriginalEntry': True,
            'assetId': 'EX-01',
            'assetType': 'Excavator',
            'operatorName': 'Sam Dlamini',
        },
        {
            'id': 'op-2',
            'date': '2024-03-09',
            'subjectKey': 'EX-01',
            'authorRole': 'Operator',
            'totalHours': 3,
            'assetId': 'EX-01',
            'assetType': 'Excavator',
            'operatorName': 'Sam Dlamini',
        },
        {
            'id': 'op-3',
            'date': '2024-03-05',
            'subjectKey': 'DT-07',
            'authorRole': 'Operator',
            'totalHours': 0.5,
            'isRainDay': True,
            'assetId': 'DT-07',
            'assetType': 'Dump Truck',
            'operatorName': 'Lee Naidoo',
        },
        {
            'id': 'sub-1',
            'date': '2024-03-06',
            'subjectKey': 'CR-02',
            'authorRole': 'Subcontractor',
            'totalHours': 6,
        },
    ]


@pytest.fixture
def entries_file(tmp_path, sample_entry_documents):
    """JSON file holding the sample entry documents."""
    path = tmp_path / 'entries.json'
    path.write_text(json.dumps({'entries': sample_entry_documents}))
    return path


@pytest.fixture
def config_file(tmp_path):
    """JSON file holding a stored tenant billing configuration."""
    path = tmp_path / 'billing.json'
    path.write_text(json.dumps({
        **DEFAULT_DOCUMENT,
        'saturday': {
            **DEFAULT_DOCUMENT['saturday'], 'minHours': 5, 'rateMultiplier': 2
        },
        'breakdown': {'enabled': False},
    }))
    return path


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Add integration marker for tests in tests/integration/
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
