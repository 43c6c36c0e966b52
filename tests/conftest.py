"""Shared fixtures."""
import httpx
import pytest
from incidents.client import PagerDutyClient
from tests.pagerduty_fake import API_KEY, FakePagerDuty, make_incident


@pytest.fixture
def fake_pagerduty() -> FakePagerDuty:
    return FakePagerDuty([
        make_incident("PT4KHLK", "triggered", 3, "2024-01-05T15:04:05Z"),
        make_incident("PQ8XJ2C", "acknowledged", 2, "2024-01-05T03:04:05Z"),
        make_incident("PW1ZL0R", "resolved", 1, "2024-01-04T22:00:00Z", urgency="low"),
    ])


@pytest.fixture
def pagerduty_client(fake_pagerduty: FakePagerDuty) -> PagerDutyClient:
    return PagerDutyClient(
        api_key=API_KEY,
        api_url="https://api.pagerduty.com",
        transport=httpx.MockTransport(fake_pagerduty.handler),
    )
