"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from planning_poker.adapters.supabase_admin_repository import SupabaseAdminRepository
from planning_poker.adapters.supabase_audit_repository import SupabaseAuditRepository
from planning_poker.adapters.supabase_estimate_repository import (
    SupabaseEstimateRepository,
)
from planning_poker.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from planning_poker.config import Settings
from planning_poker.services.admin import AdminService
from planning_poker.services.audit import AuditService
from planning_poker.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    audit_service: AuditService
    admin_service: AdminService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    estimate_repository = SupabaseEstimateRepository(supabase_client)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    session_service = SessionService(
        session_repository=session_repository,
        estimate_repository=estimate_repository,
        audit_service=audit_service,
    )
    admin_service = AdminService(
        admin_repository=SupabaseAdminRepository(supabase_client),
        estimate_repository=estimate_repository,
    )

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        audit_service=audit_service,
        admin_service=admin_service,
    )
