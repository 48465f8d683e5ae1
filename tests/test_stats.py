import pytest
from pydantic import TypeAdapter, ValidationError

from core.stats import (
    JellyfinPayload,
    ProxmoxPayload,
    ServiceStatsPayload,
    format_bytes,
    format_percent,
    format_rate,
)

payload_adapter = TypeAdapter(ServiceStatsPayload)


def test_payload_decodes_by_discriminator():
    payload = payload_adapter.validate_python(
        {"type": "jellyfin", "jellyfin": {"tvShows": 12, "movies": 340}}
    )
    assert isinstance(payload, JellyfinPayload)
    assert payload.jellyfin.tv_shows == 12
    assert payload.jellyfin.users == 0


def test_proxmox_missing_fields_default_to_zero():
    payload = payload_adapter.validate_python({"type": "proxmox", "proxmox": {"cpuUsagePercent": 12.5}})
    assert isinstance(payload, ProxmoxPayload)
    assert payload.proxmox.memory_total_bytes == 0
    assert payload.proxmox.net_down_bps == 0


def test_payload_encodes_with_wire_names():
    payload = payload_adapter.validate_python({"type": "jellyfin", "jellyfin": {"tvShows": 1, "movies": 2}})
    assert payload.model_dump(by_alias=True) == {
        "type": "jellyfin",
        "jellyfin": {"tvShows": 1, "movies": 2, "users": 0},
    }


def test_unknown_payload_type_is_rejected():
    with pytest.raises(ValidationError):
        payload_adapter.validate_python({"type": "plex", "plex": {}})


def test_formatters():
    assert format_percent(42.4) == "42%"
    assert format_bytes(512) == "512 bytes"
    assert format_bytes(2048) == "2 KB"
    assert format_bytes(3 * 1024 ** 3 // 2) == "1.5 GB"
    assert format_rate(1024 ** 2) == "1.0 MB/s"
