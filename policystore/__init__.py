"""policystore: MongoDB policy storage for Casbin-style enforcers."""

from .adapter import FilteredPolicyError, ManagedPolicyAdapter, PolicyAdapter
from .codec import decode_rule, encode_rule
from .models import Assertion, PolicyModel, RuleRecord
from .selector import FieldFilter, build_filter_selector
from .stores import get_store

__version__ = "0.1.0"
__all__ = [
    "Assertion",
    "FieldFilter",
    "FilteredPolicyError",
    "ManagedPolicyAdapter",
    "PolicyAdapter",
    "PolicyModel",
    "RuleRecord",
    "build_filter_selector",
    "decode_rule",
    "encode_rule",
    "get_store",
]
