# certperu/db/base.py
from certperu.db.base_class import Base  # mantiene

# Carga los módulos para registrar las tablas en el metadata (alembic / create_all)
import certperu.models.admin_user           # noqa: F401
import certperu.models.participant          # noqa: F401
import certperu.models.category             # noqa: F401
import certperu.models.course               # noqa: F401
import certperu.models.enrollment           # noqa: F401
import certperu.models.certificate          # noqa: F401
import certperu.models.certificate_template # noqa: F401
import certperu.models.setting              # noqa: F401
import certperu.models.course_request       # noqa: F401

__all__ = ["Base"]
