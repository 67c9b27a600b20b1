"""
JSON shapes for the HTTP surface.

The dashboard front-end speaks the proxy core's camelCase field names, so
DTOs are flattened back into that shape here: opaque metadata keys sit
next to the known fields, exactly as they arrived.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from conn_reconciler.dto import DerivedConnection, PublishedViews, VirtualConnection


def connection_to_json(conn: DerivedConnection) -> Dict[str, Any]:
    out: Dict[str, Any] = dict(conn.metadata)
    out.update(
        {
            "id": conn.id,
            "chains": list(conn.chains),
            "upload": conn.upload,
            "download": conn.download,
            "uploadSpeed": conn.upload_speed,
            "downloadSpeed": conn.download_speed,
        }
    )
    if conn.preserve is not None:
        out["preserve"] = conn.preserve
    return out


def virtual_to_json(row: VirtualConnection) -> Dict[str, Any]:
    return {
        "preserve": row.bucket,
        "upload": row.upload,
        "download": row.download,
        "uploadSpeed": row.upload_speed,
        "downloadSpeed": row.download_speed,
        "members": row.member_count,
    }


def connections_to_json(conns: Any) -> List[Dict[str, Any]]:
    return [connection_to_json(c) for c in conns]


def virtual_map_to_json(virtual: Mapping[str, VirtualConnection]) -> Dict[str, Any]:
    return {bucket: virtual_to_json(row) for bucket, row in virtual.items()}


def views_to_json(views: PublishedViews) -> Dict[str, Any]:
    return {
        "sequence": views.sequence,
        "active": connections_to_json(views.active),
        "closed": connections_to_json(views.closed),
        "virtual": virtual_map_to_json(views.virtual),
    }
