"""
Tests for oven owner resolution.
"""

import pytest

from kolibri_bot.errors import OwnerResolutionError
from kolibri_bot.owner import find_storage_field, resolve_owner

from conftest import make_op, owner_storage


@pytest.mark.parametrize("storage", [
    None,
    [],
    {"children": []},
    ["not-a-dict"],
    [{"children": None}],
    [{"children": [{"name": "borrowedTokens", "value": "1"}]}],
])
def test_find_storage_field_missing(storage):
    assert find_storage_field(storage, "owner") is None


def test_find_storage_field_reads_first_element_children():
    assert find_storage_field(owner_storage("tz1abc"), "owner") == "tz1abc"


@pytest.mark.asyncio
async def test_resolve_owner_prefers_makeoven_source(explorer):
    ops = [make_op(1, "deposit", "tz1x"), make_op(2, "makeOven", "tz1creator")]

    owner = await resolve_owner(explorer, "mainnet", "KT1oven", ops)

    assert owner == "tz1creator"
    assert explorer.count("storage") == 0


@pytest.mark.asyncio
async def test_resolve_owner_falls_back_to_storage(explorer):
    explorer.storage["KT1oven"] = owner_storage("tz1abc")

    owner = await resolve_owner(explorer, "mainnet", "KT1oven", [make_op(1, "deposit", "tz1x")])

    assert owner == "tz1abc"


@pytest.mark.asyncio
async def test_resolve_owner_raises_when_storage_has_no_owner(explorer):
    explorer.storage["KT1oven"] = [{"children": [{"name": "owner", "value": ""}]}]

    with pytest.raises(OwnerResolutionError):
        await resolve_owner(explorer, "mainnet", "KT1oven", [])
