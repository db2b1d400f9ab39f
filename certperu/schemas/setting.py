from typing import Optional, List
from pydantic import BaseModel, Field

from certperu.schemas.certificate import Signatory

class InstitutionConfig(BaseModel):
    """Configuración de la institución, cargada una vez por request desde `settings`."""
    name: str = "CertificadosPerú"
    ruc: Optional[str] = None
    address: Optional[str] = None
    director_name: str = "Director General"
    director_title: str = "Director"

    def default_signatories(self) -> List[Signatory]:
        return [Signatory(name=self.director_name, title=self.director_title)]

class InstitutionConfigUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    ruc: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    director_name: Optional[str] = None
    director_title: Optional[str] = None
