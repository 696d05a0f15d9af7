from __future__ import annotations

from flask import Flask

from ..common.validators import require_enum
from ..common.web import current_user_id, json_body, ok, provider_required, require_int
from ..container import Container
from ..core.enums import RelationshipStatus


def register(app: Flask, container: Container) -> None:
    guard = container.relationship_guard

    @app.route("/api/relationships", methods=["GET"], endpoint="api_relationships_list")
    @provider_required
    def list_relationships():
        return ok([r.to_dict() for r in guard.list_for_provider(current_user_id())])

    @app.route("/api/relationships", methods=["POST"], endpoint="api_relationships_link")
    @provider_required
    def link_worker():
        data = json_body()
        rel = guard.link(
            provider_id=current_user_id(),
            worker_id=require_int(data, "support_worker_id"),
            status=require_enum(RelationshipStatus, data.get("status") or RelationshipStatus.ACTIVE.value, "status"),
            hourly_rate=data.get("hourly_rate"),
        )
        return ok(rel.to_dict(), 201)
