from __future__ import annotations
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, computed_field

class Evento(BaseModel):
    model_config = ConfigDict(frozen=True)

    codigo: str
    tipo: str
    valor: float
    ref: str = ""

class Provento(BaseModel):
    model_config = ConfigDict(frozen=True)

    tipo: str
    valor: float
    codigo: Optional[str] = None
    ref: Optional[str] = None

class Desconto(BaseModel):
    model_config = ConfigDict(frozen=True)

    tipo: str
    valor: float
    codigo: Optional[str] = None
    ref: Optional[str] = None

class BasesCalculo(BaseModel):
    model_config = ConfigDict(frozen=True)

    inss: Optional[float] = None
    irrf: Optional[float] = None
    fgts: Optional[float] = None

class ValoresCalculados(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bruto: float = 0.0
    total_descontos: float = Field(0.0, alias="totalDescontos")
    liquido: float = 0.0
    fgts_acumulado: Optional[float] = Field(None, alias="fgtsAcumulado")
    irrf_descontado: Optional[float] = Field(None, alias="irrfDescontado")

class Employee(BaseModel):
    """One finalized record of the folha analítica."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    matricula: str
    funcao: str = ""
    secao: str = ""
    filial: str = ""
    admissao: Optional[str] = None
    demissao: Optional[str] = None
    salario_base: float = Field(0.0, alias="salarioBase")
    eventos: List[Evento] = Field(default_factory=list)
    proventos: List[Provento] = Field(default_factory=list)
    descontos: List[Desconto] = Field(default_factory=list)
    bases: BasesCalculo = Field(default_factory=BasesCalculo)
    valores: ValoresCalculados = Field(default_factory=ValoresCalculados)
    eventos_brutos: Optional[List[str]] = Field(None, alias="eventosBrutos")

class ProcessingStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_files: int = Field(0, alias="totalFiles")
    total_employees: int = Field(0, alias="totalEmployees")
    successful_extractions: int = Field(0, alias="successfulExtractions")
    errors: List[str] = Field(default_factory=list)
    processing_time: float = Field(0.0, alias="processingTime")  # ms

class ExtractionResult(BaseModel):
    employees: List[Employee] = Field(default_factory=list)
    stats: ProcessingStats = Field(default_factory=ProcessingStats)

    @computed_field
    @property
    def success(self) -> bool:
        return not self.stats.errors
