"""
Tests for the BagelPay data models.

Run with: python -m pytest tests/ -v
"""

import json

import pytest


class TestSerialization:
    """Test to_dict / from_dict behavior."""

    def test_absent_fields_are_omitted(self):
        from bagelpay import CheckoutRequest

        request = CheckoutRequest(product_id="prod_1")

        assert request.to_dict() == {"product_id": "prod_1"}

    def test_empty_values_are_kept(self):
        from bagelpay import UpdateProductRequest

        request = UpdateProductRequest(
            product_id="prod_1", description="", trial_days=0, tax_inclusive=False
        )

        assert request.to_dict() == {
            "product_id": "prod_1",
            "description": "",
            "trial_days": 0,
            "tax_inclusive": False,
        }

    def test_missing_fields_stay_none(self):
        from bagelpay import Product

        product = Product.from_dict({"product_id": "prod_1", "is_archive": False})

        assert product.is_archive is False
        assert product.trial_days is None
        assert product.recurring_interval is None

    def test_unknown_keys_ignored(self):
        from bagelpay import Product

        product = Product.from_dict({"product_id": "prod_1", "brand_new_field": 1})

        assert product.product_id == "prod_1"

    def test_nested_models(self):
        from bagelpay import Subscription, CustomerReference

        subscription = Subscription.from_dict({
            "subscription_id": "sub_1",
            "customer": {"id": "cus_1", "email": "a@example.com"},
        })

        assert subscription.customer == CustomerReference(id="cus_1", email="a@example.com")
        assert subscription.to_dict()["customer"] == {"id": "cus_1", "email": "a@example.com"}

    def test_from_dict_requires_mapping(self):
        from bagelpay import Product, ProductList

        with pytest.raises(TypeError):
            Product.from_dict(["not", "a", "dict"])

        with pytest.raises(TypeError):
            ProductList.from_dict("nope")

    def test_models_are_immutable(self):
        from dataclasses import FrozenInstanceError
        from bagelpay import Product

        product = Product(product_id="prod_1")

        with pytest.raises(FrozenInstanceError):
            product.price = 10.0

    def test_metadata_accepts_any_json(self):
        from bagelpay import CheckoutRequest

        request = CheckoutRequest(
            product_id="prod_1",
            metadata={"order": 1, "gift": True, "note": None, "items": [{"sku": "a"}]},
        )

        assert json.loads(request.to_json())["metadata"] == {
            "order": 1, "gift": True, "note": None, "items": [{"sku": "a"}]
        }


class TestRoundTrip:
    """Serializing and parsing back preserves present and absent fields."""

    def test_checkout_request(self):
        from bagelpay import CheckoutRequest, Customer

        original = CheckoutRequest(
            product_id="prod_1",
            customer=Customer(email="payer@example.com"),
            request_id="req_1",
            units="2",
            success_url="https://example.com/ok",
            metadata={"order_id": "o_1", "amount": 12.5},
        )

        assert CheckoutRequest.from_json(original.to_json()) == original

    def test_sparse_subscription(self):
        from bagelpay import Subscription

        original = Subscription(subscription_id="sub_1", status="trialing", amount=0.0)
        restored = Subscription.from_dict(original.to_dict())

        assert restored == original
        assert restored.cancel_at is None
        assert restored.customer is None

    def test_transaction_with_customer(self):
        from bagelpay import Transaction, CustomerReference

        original = Transaction(
            transaction_id="txn_1",
            amount=10.0,
            refunded_amount=0.0,
            customer=CustomerReference(email="a@example.com"),
        )

        assert Transaction.from_json(original.to_json()) == original

    def test_list_response(self):
        from bagelpay import CustomerList, CustomerData

        original = CustomerList(
            total=12,
            items=[CustomerData(id=1, email="a@example.com"), CustomerData(id=2)],
            code=200,
            msg="ok",
        )

        assert CustomerList.from_dict(original.to_dict()) == original

    @pytest.mark.parametrize("name", [
        "Product",
        "CheckoutResponse",
        "CreateProductRequest",
        "UpdateProductRequest",
        "ProductList",
        "TransactionList",
        "SubscriptionList",
        "APIErrorPayload",
    ])
    def test_populated_model(self, name):
        import bagelpay

        original = sample(name)
        model_class = getattr(bagelpay, name)

        assert type(original) is model_class
        assert model_class.from_json(original.to_json()) == original


def sample(name):
    """A populated instance of the named model."""
    from bagelpay import (
        APIErrorPayload, CheckoutResponse, CreateProductRequest, CustomerReference,
        Product, ProductList, Subscription, SubscriptionList, Transaction,
        TransactionList, UpdateProductRequest,
    )

    product = Product(
        name="Pro API Access",
        description="Monthly plan",
        price=29.99,
        currency="USD",
        object="product",
        mode="test",
        product_id="prod_1",
        store_id="store_1",
        product_url="https://pay.example/p/prod_1",
        billing_type="subscription",
        billing_period="monthly",
        tax_category="digital_products",
        tax_inclusive=False,
        is_archive=False,
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-02T00:00:00Z",
        trial_days=7,
        recurring_interval="monthly",
    )
    customer = CustomerReference(id="cus_1", email="a@example.com")

    samples = {
        "Product": product,
        "CheckoutResponse": CheckoutResponse(
            object="checkout",
            units=1,
            metadata={"order_id": "o_1", "items": [1, 2]},
            status="pending",
            mode="test",
            payment_id="pay_1",
            product_id="prod_1",
            request_id="req_1",
            success_url="https://example.com/ok",
            checkout_url="https://pay.example/c/pay_1",
            created_at="2026-01-01T00:00:00Z",
            updated_at="2026-01-01T00:00:00Z",
            expires_on="2026-01-02T00:00:00Z",
        ),
        "CreateProductRequest": CreateProductRequest(
            name="Pro API Access",
            price=29.99,
            currency="USD",
            billing_type="subscription",
            description="",
            tax_inclusive=True,
            tax_category="saas",
            recurring_interval="monthly",
            trial_days=0,
        ),
        "UpdateProductRequest": UpdateProductRequest(
            product_id="prod_1",
            name="Pro",
            description="Updated",
            price=19.99,
            currency="EUR",
            billing_type="subscription",
            tax_inclusive=False,
            tax_category="saas",
            recurring_interval="yearly",
            trial_days=14,
        ),
        "ProductList": ProductList(
            total=3, items=[product, Product(product_id="prod_2")], code=200, msg="ok"
        ),
        "TransactionList": TransactionList(
            total=1,
            items=[Transaction(
                transaction_id="txn_1",
                amount=49.99,
                amount_paid=49.99,
                refunded_amount=0.0,
                currency="USD",
                type="payment",
                customer=customer,
                fees=1.75,
                net=48.24,
            )],
            code=200,
            msg="ok",
        ),
        "SubscriptionList": SubscriptionList(
            total=1,
            items=[Subscription(
                subscription_id="sub_1",
                status="active",
                customer=customer,
                amount=29.99,
                units=1,
                recurring_interval="monthly",
            )],
        ),
        "APIErrorPayload": APIErrorPayload(
            code=10001, message="price required", details="price <= 0"
        ),
    }
    return samples[name]


class TestErrorPayload:
    """Test the API error payload model."""

    def test_fallback(self):
        from bagelpay import APIErrorPayload

        payload = APIErrorPayload.fallback(502, "Bad Gateway")

        assert payload.code == 502
        assert payload.message == "HTTP 502: Bad Gateway"
        assert payload.details is None
