"""Audit paths."""
from ..routing import PathRouter, RequestContext
from ..use_cases.audit import list_audit_logs_use_case

router = PathRouter(prefix="/admin/audit")


@router.path("/list", permission="canViewAudit")
def list_audit_logs(ctx: RequestContext):
    """Latest audit entries with actor names."""
    return list_audit_logs_use_case(db=ctx.db)
