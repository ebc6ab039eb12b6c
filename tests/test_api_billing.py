"""Tests for the billing API endpoints."""

from tests.mocks import card_declined


def test_create_customer_returns_wrapped_customer(client, gateway):
    response = client.post("/create-customer", json={"email": "jane@example.com"})

    assert response.status_code == 200
    assert response.json() == {
        "customer": {"id": "cus_123", "object": "customer", "email": "jane@example.com"}
    }
    assert gateway.calls_to("create_customer") == [(("jane@example.com",), {})]


def test_create_customer_requires_email(client, gateway):
    response = client.post("/create-customer", json={})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"
    assert gateway.calls == []


def test_create_subscription_attaches_card_then_subscribes(client, gateway):
    response = client.post(
        "/create-subscription",
        json={"customerId": "cus_1", "paymentMethodId": "pm_1", "priceId": "PREMIUM"},
    )

    assert response.status_code == 200
    assert response.json()["id"] == "sub_new"
    assert gateway.call_names == [
        "attach_payment_method",
        "set_default_payment_method",
        "create_subscription",
    ]
    (params,), _ = gateway.calls_to("create_subscription")[0]
    assert params == {
        "customer": "cus_1",
        "items": [{"price": "price_premium"}],
        "expand": ["latest_invoice.payment_intent", "pending_setup_intent"],
    }


def test_create_subscription_declined_card_returns_402(client, gateway):
    gateway.fail["attach_payment_method"] = card_declined("Your card was declined.")

    response = client.post(
        "/create-subscription",
        json={"customerId": "cus_1", "paymentMethodId": "pm_bad", "priceId": "BASIC"},
    )

    assert response.status_code == 402
    assert response.json() == {"error": {"message": "Your card was declined."}}
    assert "create_subscription" not in gateway.call_names
    assert "set_default_payment_method" not in gateway.call_names


def test_create_subscription_rejects_unknown_plan(client, gateway):
    response = client.post(
        "/create-subscription",
        json={"customerId": "cus_1", "paymentMethodId": "pm_1", "priceId": "GOLD"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["details"][0]["loc"][-1] == "priceId"
    assert gateway.calls == []


def test_retry_invoice_expands_payment_intent(client, gateway):
    response = client.post(
        "/retry-invoice",
        json={"customerId": "cus_1", "paymentMethodId": "pm_2", "invoiceId": "in_9"},
    )

    assert response.status_code == 200
    assert response.json()["id"] == "in_9"
    assert gateway.calls_to("retrieve_invoice") == [
        (("in_9",), {"expand": ["payment_intent"]})
    ]


def test_retry_invoice_decline_nests_error_under_result(client, gateway):
    gateway.fail["set_default_payment_method"] = card_declined("Insufficient funds.")

    response = client.post(
        "/retry-invoice",
        json={"customerId": "cus_1", "paymentMethodId": "pm_2", "invoiceId": "in_9"},
    )

    assert response.status_code == 402
    assert response.json() == {"result": {"error": {"message": "Insufficient funds."}}}
    assert "retrieve_invoice" not in gateway.call_names


def test_retrieve_upcoming_invoice_swaps_first_item(client, gateway):
    response = client.post(
        "/retrieve-upcoming-invoice",
        json={"subscriptionId": "sub_1", "customerId": "cus_1", "newPriceId": "PREMIUM"},
    )

    assert response.status_code == 200
    assert response.json() == {"object": "invoice", "amount_due": 1200}
    assert gateway.call_names == ["retrieve_subscription", "retrieve_upcoming_invoice"]
    (params,), _ = gateway.calls_to("retrieve_upcoming_invoice")[0]
    assert params == {
        "subscription_prorate": True,
        "customer": "cus_1",
        "subscription": "sub_1",
        "subscription_items": [
            {"id": "si_current", "clear_usage": True, "deleted": True},
            {"price": "price_premium", "deleted": False},
        ],
    }


def test_cancel_subscription(client, gateway):
    response = client.post("/cancel-subscription", json={"subscriptionId": "sub_1"})

    assert response.status_code == 200
    assert response.json()["status"] == "canceled"
    assert gateway.calls_to("cancel_subscription") == [(("sub_1",), {})]


def test_update_subscription_replaces_first_item_price(client, gateway):
    response = client.post(
        "/update-subscription",
        json={"subscriptionId": "sub_1", "newPriceId": "BASIC"},
    )

    assert response.status_code == 200
    assert gateway.call_names == ["retrieve_subscription", "update_subscription"]
    assert gateway.calls_to("retrieve_subscription") == [(("sub_1",), {})]
    assert gateway.calls_to("update_subscription") == [
        (
            (
                "sub_1",
                {
                    "cancel_at_period_end": False,
                    "items": [{"id": "si_current", "price": "price_basic"}],
                },
            ),
            {},
        )
    ]


def test_unhandled_stripe_error_uses_error_envelope(client, gateway):
    gateway.fail["cancel_subscription"] = card_declined("No such subscription")

    response = client.post("/cancel-subscription", json={"subscriptionId": "sub_x"})

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "internal_error"
    assert body["details"] is None
    assert "request_id" in body


def test_create_product_and_prices_builds_graduated_metered_price(client, gateway):
    response = client.post("/create-product-and-prices")

    assert response.status_code == 200
    assert response.json() == {
        "price": {"id": "price_new", "object": "price", "product": "prod_123"}
    }
    (params,), _ = gateway.calls_to("create_price")[0]
    assert params["product"] == "prod_123"
    assert params["billing_scheme"] == "tiered"
    assert params["tiers_mode"] == "graduated"
    assert params["recurring"] == {
        "interval": "month",
        "usage_type": "metered",
        "aggregate_usage": "sum",
    }
    assert params["tiers"][0]["flat_amount"] == 10000
    assert params["tiers"][0]["up_to"] == 240
    assert params["tiers"][1] == {"unit_amount": 2200, "up_to": "inf"}


def test_create_product_and_prices_price_error_returns_empty_body(client, gateway):
    gateway.fail["create_price"] = card_declined("Invalid tiers")

    response = client.post("/create-product-and-prices")

    assert response.status_code == 200
    assert response.content == b""


def test_connect_subscription_uses_configured_accounts(client, gateway):
    response = client.post("/create-subscription-between-J-and-J")

    assert response.status_code == 200
    assert response.json()["subscription"]["customer"] == "cus_connect"
    (params,), _ = gateway.calls_to("create_subscription")[0]
    assert params["items"] == [{"price": "price_connect"}]
    assert params["transfer_data"] == {"destination": "acct_connect"}
    assert params["application_fee_percent"] == 30
    assert params["cancel_at"] == 1600557330
    assert params["payment_behavior"] == "error_if_incomplete"
    assert params["proration_behavior"] == "create_prorations"


def test_connect_subscription_error_returns_empty_body(client, gateway):
    gateway.fail["create_subscription"] = card_declined("No such price")

    response = client.post("/create-subscription-between-J-and-J")

    assert response.status_code == 200
    assert response.content == b""


def test_use_product_sets_usage_once_with_fresh_idempotency_key(client, gateway):
    first = client.post("/use-product", json={"minutes": 42})
    second = client.post("/use-product", json={"minutes": 42})

    assert first.status_code == 200
    assert first.json()["usageRecord"]["quantity"] == 42
    assert second.status_code == 200
    calls = gateway.calls_to("create_usage_record")
    assert len(calls) == 2
    (item_id, params), kwargs = calls[0]
    assert item_id == "si_usage"
    assert params["quantity"] == 42
    assert params["action"] == "set"
    assert isinstance(params["timestamp"], int)
    assert calls[0][1]["idempotency_key"] != calls[1][1]["idempotency_key"]


def test_use_product_stripe_error_returns_empty_body(client, gateway):
    gateway.fail["create_usage_record"] = card_declined("Subscription item gone")

    response = client.post("/use-product", json={"minutes": 5})

    assert response.status_code == 200
    assert response.content == b""


def test_retrieve_customer_payment_method(client, gateway):
    response = client.post(
        "/retrieve-customer-payment-method", json={"paymentMethodId": "pm_7"}
    )

    assert response.status_code == 200
    assert response.json()["card"] == {"last4": "4242"}
    assert gateway.calls_to("retrieve_payment_method") == [(("pm_7",), {})]


def test_report_usage_is_not_implemented(client, gateway):
    response = client.post("/report-usage", json={"number": 3})

    assert response.status_code == 501
    assert response.json()["code"] == "http_501"
    assert gateway.calls == []


def test_create_invoice_dmr_creates_discounted_invoice_and_pays_it(client, gateway):
    response = client.post("/create-invoice-dmr")

    assert response.status_code == 200
    assert response.json() == {"invoice": {"id": "in_123", "object": "invoice", "status": "paid"}}
    assert gateway.call_names == ["create_invoice_item", "create_invoice", "pay_invoice"]
    (item_params,), _ = gateway.calls_to("create_invoice_item")[0]
    assert item_params == {"customer": "cus_connect", "price": "price_invoice"}
    (invoice_params,), _ = gateway.calls_to("create_invoice")[0]
    assert invoice_params["discounts"] == [{"coupon": "coupon_123"}]
    assert invoice_params["auto_advance"] is True


def test_create_invoice_dmr_error_returns_empty_body(client, gateway):
    gateway.fail["pay_invoice"] = card_declined()

    response = client.post("/create-invoice-dmr")

    assert response.status_code == 200
    assert response.content == b""
