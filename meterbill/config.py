import enum
import logging
import os
from dataclasses import dataclass, fields

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class PricePlan(str, enum.Enum):
    basic = "BASIC"
    premium = "PREMIUM"


# env name -> remediation hint, in the order they are reported
REQUIRED_SETTINGS: dict[str, str] = {
    "STRIPE_SECRET_KEY": "Add STRIPE_SECRET_KEY to your .env file.",
    "STRIPE_PUBLISHABLE_KEY": "Add STRIPE_PUBLISHABLE_KEY to your .env file.",
    "BASIC": "Add BASIC priceID to your .env file. See .env.example for an example.",
    "PREMIUM": "Add PREMIUM priceID to your .env file. See .env.example for an example.",
    "STATIC_DIR": "Add STATIC_DIR to your .env file. Check .env.example for an example.",
    "COMPTE_CONNECT_CLIENT_ID": (
        "Add COMPTE_CONNECT_CLIENT_ID to your .env file. Check .env.example for an example."
    ),
    "COMPTE_CUSTOMER_CLIENT_ID": (
        "Add COMPTE_CUSTOMER_CLIENT_ID to your .env file. Check .env.example for an example."
    ),
}


@dataclass(frozen=True)
class Settings:
    stripe_secret_key: str = ""
    stripe_publishable_key: str = ""
    basic_price_id: str = ""
    premium_price_id: str = ""
    static_dir: str = ""
    connect_account_id: str = ""
    connect_customer_id: str = ""
    stripe_webhook_secret: str = ""
    stripe_api_version: str = "2020-08-27"

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 4242
    cors_origins: str = ""  # Comma-separated origins

    # Demo resources used by the fixed-literal flows
    connect_price_id: str = "price_1LIwQKDnahqFVvJv90OnmVJL"
    connect_application_fee_percent: float = 30
    connect_cancel_at: int = 1600557330  # 2020-09-19 23:15:30 UTC
    usage_subscription_item_id: str = "si_M0yqKCA51nnVg0"
    invoice_price_id: str = "price_1LskdDDnahqFVvJvYNedjT3B"
    invoice_coupon_id: str = "NbCQqcV1"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = {f.name: f.default for f in fields(cls)}
        return cls(
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY", ""),
            stripe_publishable_key=os.getenv("STRIPE_PUBLISHABLE_KEY", ""),
            basic_price_id=os.getenv("BASIC", ""),
            premium_price_id=os.getenv("PREMIUM", ""),
            static_dir=os.getenv("STATIC_DIR", ""),
            connect_account_id=os.getenv("COMPTE_CONNECT_CLIENT_ID", ""),
            connect_customer_id=os.getenv("COMPTE_CUSTOMER_CLIENT_ID", ""),
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET", ""),
            stripe_api_version=os.getenv(
                "STRIPE_API_VERSION", defaults["stripe_api_version"]
            ),
            host=os.getenv("HOST", defaults["host"]),
            port=int(os.getenv("PORT", str(defaults["port"]))),
            cors_origins=os.getenv("CORS_ORIGINS", ""),
            connect_price_id=os.getenv(
                "CONNECT_PRICE_ID", defaults["connect_price_id"]
            ),
            connect_application_fee_percent=float(
                os.getenv(
                    "CONNECT_APPLICATION_FEE_PERCENT",
                    str(defaults["connect_application_fee_percent"]),
                )
            ),
            connect_cancel_at=int(
                os.getenv("CONNECT_CANCEL_AT", str(defaults["connect_cancel_at"]))
            ),
            usage_subscription_item_id=os.getenv(
                "USAGE_SUBSCRIPTION_ITEM_ID", defaults["usage_subscription_item_id"]
            ),
            invoice_price_id=os.getenv(
                "INVOICE_PRICE_ID", defaults["invoice_price_id"]
            ),
            invoice_coupon_id=os.getenv(
                "INVOICE_COUPON_ID", defaults["invoice_coupon_id"]
            ),
        )

    def price_for(self, plan: PricePlan) -> str:
        """Resolve a plan identifier sent by the client to its Stripe price id."""
        prices = {
            PricePlan.basic: self.basic_price_id,
            PricePlan.premium: self.premium_price_id,
        }
        return prices[PricePlan(plan)]


_SETTING_ENV_NAMES: dict[str, str] = {
    "STRIPE_SECRET_KEY": "stripe_secret_key",
    "STRIPE_PUBLISHABLE_KEY": "stripe_publishable_key",
    "BASIC": "basic_price_id",
    "PREMIUM": "premium_price_id",
    "STATIC_DIR": "static_dir",
    "COMPTE_CONNECT_CLIENT_ID": "connect_account_id",
    "COMPTE_CUSTOMER_CLIENT_ID": "connect_customer_id",
}


def missing_settings(s: Settings) -> list[str]:
    """Return one remediation message per required setting that is empty."""
    return [
        REQUIRED_SETTINGS[env_name]
        for env_name, attr in _SETTING_ENV_NAMES.items()
        if not getattr(s, attr)
    ]


def validate_settings(s: Settings) -> list[str]:
    """Validate optional settings at startup. Returns list of warnings."""
    warnings: list[str] = []
    if not s.stripe_webhook_secret:
        warnings.append(
            "STRIPE_WEBHOOK_SECRET is not set; the webhook endpoint will reject events"
        )
    if s.stripe_secret_key.startswith("sk_live_") and s.stripe_publishable_key.startswith("pk_test_"):
        warnings.append("Live secret key is paired with a test publishable key")
    return warnings


settings = Settings.from_env()
