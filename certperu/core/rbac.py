# certperu/core/rbac.py
from fastapi import Depends

from certperu.api.deps import get_current_admin
from certperu.core.errors import Forbidden
from certperu.models.admin_user import AdminRole, AdminUser

_HIERARCHY = [AdminRole.EDITOR, AdminRole.ADMIN, AdminRole.SUPERADMIN]
_RANK = {role: idx for idx, role in enumerate(_HIERARCHY)}

def require_roles(*roles: AdminRole):
    allowed = set(roles)
    def dep(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
        if admin.role not in allowed:
            raise Forbidden("Rol insuficiente")
        return admin
    return dep

def require_min_role(min_role: AdminRole):
    if min_role not in _RANK:
        raise RuntimeError(f"Rol desconocido: {min_role}")
    need = _RANK[min_role]
    def dep(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
        if _RANK.get(admin.role, -1) < need:
            raise Forbidden("Rol insuficiente")
        return admin
    return dep

# atajos usados por los routers
require_editor = require_min_role(AdminRole.EDITOR)
require_admin = require_min_role(AdminRole.ADMIN)
require_superadmin = require_roles(AdminRole.SUPERADMIN)
