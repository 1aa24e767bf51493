"""
Tests for oven enumeration.
"""

import pytest

from kolibri_bot.errors import DataShapeError
from kolibri_bot.ovens import OvenRegistryClient


@pytest.mark.asyncio
async def test_get_all_ovens_pages_through_oven_map(explorer, network_config):
    explorer.storage["KT1registry"] = [{"children": [{"name": "ovenMap", "value": "42"}]}]
    explorer.bigmap_pages = [
        [{"data": {"key": {"value": "KT1a"}, "value": {"value": "tz1a"}}},
         {"data": {"key": {"value": "KT1b"}, "value": {"value": "tz1b"}}}],
        [{"data": {"key": {"value": "KT1c"}, "value": None}},
         {"data": {"key": None}}],
    ]
    client = OvenRegistryClient(explorer, network_config, page_size=2)

    ovens = await client.get_all_ovens()

    assert [o.ovenAddress for o in ovens] == ["KT1a", "KT1b", "KT1c"]
    assert not hasattr(ovens[0], "ovenOwner")
    assert [c for c in explorer.calls if c[0] == "bigmap"] == [
        ("bigmap", 42, 0, 2),
        ("bigmap", 42, 2, 2),
        ("bigmap", 42, 4, 2),
    ]


@pytest.mark.asyncio
async def test_get_all_ovens_accepts_flat_key_entries(explorer, network_config):
    explorer.storage["KT1registry"] = [{"children": [{"name": "ovenMap", "value": 7}]}]
    explorer.bigmap_pages = [[{"key": "KT1flat"}]]

    ovens = await OvenRegistryClient(explorer, network_config).get_all_ovens()

    assert [o.ovenAddress for o in ovens] == ["KT1flat"]


@pytest.mark.asyncio
async def test_get_all_ovens_requires_oven_map(explorer, network_config):
    explorer.storage["KT1registry"] = [{"children": [{"name": "admin", "value": "tz1admin"}]}]

    with pytest.raises(DataShapeError):
        await OvenRegistryClient(explorer, network_config).get_all_ovens()
