"""
Billing configuration loader.

Loads plan member ceilings and trial settings from config/billing.yml.
The member ceilings are handed to the entitlement evaluator as an explicit
argument; nothing in the evaluator reads this module directly.

Usage:
    from clubcheck.config.billing import get_billing_config

    config = get_billing_config()
    state = evaluate(snapshot, now, plan_limits=config.plan_limits)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

# Built-in defaults used when config/billing.yml is absent
_DEFAULT_PLAN = "starter"
_DEFAULT_PLAN_LIMITS = {"starter": 75, "pro": 150}
_DEFAULT_TRIAL_DAYS = 14


@dataclass(frozen=True)
class BillingConfig:
    """Parsed billing configuration."""

    plan_limits: Mapping[str, int] = field(
        default_factory=lambda: dict(_DEFAULT_PLAN_LIMITS)
    )
    default_plan: str = _DEFAULT_PLAN
    trial_days: int = _DEFAULT_TRIAL_DAYS
    demo_account_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "plan_limits", MappingProxyType(dict(self.plan_limits)))
        if self.default_plan not in self.plan_limits:
            raise ValueError(
                f"default_plan '{self.default_plan}' is not defined in plans"
            )
        if self.trial_days < 0:
            raise ValueError("trial_days must be non-negative")

    def is_demo_account(self, account_id: str) -> bool:
        return bool(self.demo_account_id) and account_id == self.demo_account_id


def parse_billing_config(raw: Dict[str, Any]) -> BillingConfig:
    """Validate a raw YAML mapping and build a BillingConfig."""
    if not isinstance(raw, dict):
        raise ValueError("billing config must contain a top-level mapping")

    plans_raw = raw.get("plans", {})
    if not isinstance(plans_raw, dict) or not plans_raw:
        raise ValueError("billing config must define at least one plan under 'plans'")

    plan_limits: Dict[str, int] = {}
    for plan_type, plan_cfg in plans_raw.items():
        if not isinstance(plan_type, str) or not plan_type.strip():
            raise ValueError(f"invalid plan type: {plan_type!r}")
        if not isinstance(plan_cfg, dict) or "member_limit" not in plan_cfg:
            raise ValueError(f"plan '{plan_type}' must define member_limit")
        limit = int(plan_cfg["member_limit"])
        if limit < 0:
            raise ValueError(f"plan '{plan_type}' member_limit must be non-negative")
        plan_limits[plan_type.strip()] = limit

    return BillingConfig(
        plan_limits=plan_limits,
        default_plan=str(raw.get("default_plan", _DEFAULT_PLAN)).strip(),
        trial_days=int(raw.get("trial_days", _DEFAULT_TRIAL_DAYS)),
        demo_account_id=raw.get("demo_account_id") or None,
    )


class BillingConfigLoader:
    """
    Thread-safe singleton loader for config/billing.yml.

    Path resolution order: explicit config_path, BILLING_CONFIG_PATH,
    then config/billing.yml relative to the repo root or working directory.
    """

    _instance: Optional["BillingConfigLoader"] = None
    _lock = Lock()

    def __new__(cls, config_path: Optional[str] = None):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None):
        if self._initialized:
            return

        self._config_path = config_path or os.getenv("BILLING_CONFIG_PATH")
        self._config = BillingConfig()
        self._load_lock = Lock()

        self._load()
        self._initialized = True

    def _resolve_path(self) -> Optional[Path]:
        if self._config_path:
            path = Path(self._config_path)
            if not path.exists():
                raise FileNotFoundError(f"billing config not found: {path}")
            return path

        candidates = [
            Path(__file__).parent.parent.parent.parent / "config" / "billing.yml",
            Path(os.getcwd()) / "config" / "billing.yml",
            Path(os.getcwd()) / ".." / "config" / "billing.yml",
        ]
        for p in candidates:
            resolved = p.resolve()
            if resolved.exists():
                return resolved
        return None

    def _load(self) -> None:
        with self._load_lock:
            path = self._resolve_path()
            if path is None:
                logger.warning("billing.yml not found, using built-in plan limits")
                self._config = BillingConfig()
                return

            logger.info("Loading billing config from %s", path)
            with open(path, "r") as f:
                raw = yaml.safe_load(f) or {}

            self._config = parse_billing_config(raw)
            logger.info(
                "Loaded billing config: plans=%s default_plan=%s trial_days=%d",
                dict(self._config.plan_limits),
                self._config.default_plan,
                self._config.trial_days,
            )

    def reload(self) -> None:
        """Re-read the YAML from disk."""
        self._load()

    @property
    def config(self) -> BillingConfig:
        return self._config


def get_billing_config_loader(config_path: Optional[str] = None) -> BillingConfigLoader:
    """Return the singleton BillingConfigLoader."""
    return BillingConfigLoader(config_path)


def get_billing_config() -> BillingConfig:
    """Return the currently loaded BillingConfig."""
    return get_billing_config_loader().config


def reset_billing_config_loader() -> None:
    """Reset singleton (for tests only)."""
    BillingConfigLoader._instance = None
