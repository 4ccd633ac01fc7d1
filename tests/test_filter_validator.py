#!/usr/bin/env python3
"""
Tests for empty-filter blocking and impact warnings.
"""

import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from filter_validator import (
    EMPTY_FILTER_WARNING,
    get_operation_warning,
    should_block_filter,
    validate_filter,
)


@pytest.mark.parametrize("count", [0, 1, 5, 10])
def test_small_operations_have_no_warning(count):
    assert get_operation_warning(count, "delete") is None


def test_plain_tier():
    assert get_operation_warning(50, "update") == "Will update 50 documents"
    assert get_operation_warning(11, "delete") == "Will delete 11 documents"
    assert get_operation_warning(99, "delete") == "Will delete 99 documents"


def test_single_warning_tier():
    assert get_operation_warning(150, "delete") == "⚠ Large operation: Will delete 150 documents"
    assert get_operation_warning(999, "update") == "⚠ Large operation: Will update 999 documents"


def test_double_warning_tier_groups_thousands():
    assert get_operation_warning(5000, "delete") == "⚠⚠ LARGE OPERATION: Will delete 5,000 documents"
    assert get_operation_warning(1234567, "update") == "⚠⚠ LARGE OPERATION: Will update 1,234,567 documents"


@pytest.mark.parametrize("query_filter", [None, {}])
def test_validate_empty_filter(query_filter):
    result = validate_filter(query_filter)
    assert result.is_valid is True
    assert result.is_empty is True
    assert result.is_match_all is True
    assert result.warning == EMPTY_FILTER_WARNING


def test_validate_non_empty_filter():
    result = validate_filter({"status": "active"})
    assert result.is_valid is True
    assert result.is_empty is False
    assert result.is_match_all is False
    assert result.warning is None


def test_nested_empty_branch_is_not_match_all():
    assert validate_filter({"$or": [{}]}).is_match_all is False


def test_block_empty_filter():
    result = should_block_filter({}, False, "delete")
    assert result["blocked"] is True
    assert "allowEmptyFilter" in result["reason"]
    assert "dryRun" in result["reason"]
    assert "delete" in result["reason"]


def test_block_defaults():
    result = should_block_filter(None)
    assert result["blocked"] is True
    assert "operation" in result["reason"]


def test_allow_empty_filter():
    assert should_block_filter({}, True, "delete") == {"blocked": False}


def test_non_empty_filter_not_blocked():
    assert should_block_filter({"status": "active"}, False, "delete") == {"blocked": False}
