"""compute_fingerprint unit tests."""

import os
import subprocess
import sys
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

import k1s0_pagination
from k1s0_pagination import InvalidArgumentError, compute_fingerprint

_SRC = str(Path(k1s0_pagination.__file__).resolve().parent.parent)

_SCRIPT = (
    "from k1s0_pagination import compute_fingerprint\n"
    "print(compute_fingerprint('shelves/1', "
    "{'tags': {'alpha', 'beta', 'gamma', 'delta', 'epsilon'}, 'ids': frozenset({'x', 'y', 'z'})}))\n"
)


def _fingerprint_with_hash_seed(seed: str) -> str:
    env = dict(os.environ)
    env["PYTHONHASHSEED"] = seed
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [_SRC, env.get("PYTHONPATH")]))
    result = subprocess.run(
        [sys.executable, "-c", _SCRIPT],
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def test_set_filters_stable_across_hash_seeds() -> None:
    digests = {_fingerprint_with_hash_seed(seed) for seed in ("0", "1", "12345")}
    assert len(digests) == 1
    assert digests == {
        compute_fingerprint(
            "shelves/1",
            {
                "tags": {"epsilon", "delta", "gamma", "beta", "alpha"},
                "ids": frozenset({"z", "y", "x"}),
            },
        )
    }


def test_set_and_list_members_ordered() -> None:
    assert compute_fingerprint("p", {"t": {3, 1, 2}}) == compute_fingerprint("p", {"t": {2, 3, 1}})
    # list order is significant
    assert compute_fingerprint("p", {"t": [1, 2]}) != compute_fingerprint("p", {"t": [2, 1]})


def test_nested_mapping_order_ignored() -> None:
    a = compute_fingerprint("p", {"range": {"lo": 1, "hi": 9}})
    b = compute_fingerprint("p", {"range": {"hi": 9, "lo": 1}})
    assert a == b


def test_text_form_values_supported() -> None:
    ident = uuid.UUID("12345678-1234-5678-1234-567812345678")
    filters = {
        "since": datetime(2024, 1, 15, tzinfo=timezone.utc),
        "day": date(2024, 1, 15),
        "price": Decimal("9.50"),
        "owner": ident,
    }
    assert compute_fingerprint("p", filters) == compute_fingerprint("p", dict(filters))
    assert compute_fingerprint("p", {"owner": ident}) == compute_fingerprint(
        "p", {"owner": str(ident)}
    )


@pytest.mark.parametrize("value", [object(), b"raw", 1 + 2j])
def test_unsupported_filter_value_rejected(value) -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        compute_fingerprint("p", {"x": value})
    assert exc_info.value.field == "filters"
