"""Shared test fixtures and configuration."""
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, Mock
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import Settings
from app.core.dependencies import get_order_automation
from app.services.automation.pipeline import OrderAutomationService
from app.services.menu.vocabulary import MenuVocabulary
from app.services.ordering.models import OrderResult
from tests.fakes import FakePage, FakeSession


@pytest.fixture
def test_settings():
    """Settings with settle delays disabled."""
    return Settings(
        restaurant_name="Test Grill",
        restaurant_url="https://order.example.com/pickup/1/menu",
        bot_email="bot@example.com",
        bot_last_name="PAM",
        default_wait_ms=0,
        short_wait_ms=0,
        keystroke_delay_ms=0,
        guest_submit_timeout_ms=100,
        order_submit_timeout_ms=100,
        customization_timeout_ms=100,
        selector_click_timeout_ms=100,
        screenshot_on_error=True,
        error_html_limit=5000,
    )


@pytest.fixture
def fake_page():
    """Fake ordering site page where the default order goes through."""
    return FakePage()


@pytest.fixture
def fake_session(fake_page):
    """Fake browser session around the fake page."""
    return FakeSession(fake_page)


@pytest.fixture
def automation(test_settings, fake_session):
    """Order automation service driving the fake session."""
    return OrderAutomationService(test_settings, session_factory=lambda _settings: fake_session)


@pytest.fixture
def mock_page():
    """Bare Playwright page double for component tests."""
    page = AsyncMock()
    page.evaluate = AsyncMock(return_value=False)
    handle = Mock()
    handle.as_element = Mock(return_value=None)
    page.evaluate_handle = AsyncMock(return_value=handle)
    page.query_selector = AsyncMock(return_value=None)
    return page


@pytest.fixture
def test_vocabulary_path():
    """Return path to test vocabulary YAML file."""
    return Path(__file__).parent / "fixtures" / "test_vocabulary.yaml"


@pytest.fixture
def test_vocabulary(test_vocabulary_path):
    """Vocabulary loaded from the test fixture file."""
    return MenuVocabulary(vocabulary_file=str(test_vocabulary_path))


@pytest.fixture
def mock_automation():
    """Order automation service double for API tests."""
    service = Mock(spec=OrderAutomationService)
    service.place_order = AsyncMock(
        return_value=OrderResult(
            success=True,
            confirmation_number="4821",
            estimated_pickup_time="25-35 minutes",
            total_amount="$18.50",
        )
    )
    return service


@pytest.fixture
def test_client(mock_automation):
    """Create FastAPI test client with the automation service overridden."""
    app.dependency_overrides[get_order_automation] = lambda: mock_automation

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )
