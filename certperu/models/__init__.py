from certperu.models.admin_user import AdminUser, AdminRole
from certperu.models.participant import Participant, DocumentType
from certperu.models.category import Category
from certperu.models.course import Course, CourseType, Modality
from certperu.models.enrollment import Enrollment, EnrollmentStatus
from certperu.models.certificate import Certificate, CertificateState, CourseSnapshot, InstitutionSnapshot
from certperu.models.certificate_template import CertificateTemplate, Orientation
from certperu.models.setting import Setting
from certperu.models.course_request import CourseRequest, CourseRequestState

__all__ = [
    "AdminUser", "AdminRole",
    "Participant", "DocumentType",
    "Category",
    "Course", "CourseType", "Modality",
    "Enrollment", "EnrollmentStatus",
    "Certificate", "CertificateState", "CourseSnapshot", "InstitutionSnapshot",
    "CertificateTemplate", "Orientation",
    "Setting",
    "CourseRequest", "CourseRequestState",
]
