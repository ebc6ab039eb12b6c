import pytest
from fastapi.testclient import TestClient

from meterbill.config import Settings
from meterbill.main import create_app
from tests.mocks import WEBHOOK_SECRET, FakeGateway


@pytest.fixture()
def static_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html><body>billing</body></html>")
    (tmp_path / "script.js").write_text("console.log('client');")
    return tmp_path


@pytest.fixture()
def settings(static_dir) -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_publishable_key="pk_test_123",
        basic_price_id="price_basic",
        premium_price_id="price_premium",
        static_dir=str(static_dir),
        connect_account_id="acct_connect",
        connect_customer_id="cus_connect",
        stripe_webhook_secret=WEBHOOK_SECRET,
        usage_subscription_item_id="si_usage",
        connect_price_id="price_connect",
        invoice_price_id="price_invoice",
        invoice_coupon_id="coupon_123",
    )


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def client(settings, gateway):
    app = create_app(settings=settings, gateway=gateway)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
