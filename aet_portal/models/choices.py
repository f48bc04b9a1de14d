# aet_portal/models/choices.py
"""
Fixed value sets shared by models, schemas and services.
Values are stored verbatim in the database, so never rename an entry.
"""

VEHICLE_TYPES = (
    "Unidade Tratora (Cavalo)",
    "Semirreboque",
    "Reboque",
    "Dolly",
    "Prancha",
)

LICENSE_SET_TYPES = (
    "Rodotrem 9 eixos",
    "Bitrem 9 eixos",
    "Bitrem 7 eixos",
    "Bitrem 6 eixos",
    "Prancha",
)

# Ordered as the request moves through the licensing bodies
STATUS_PENDING_REGISTRATION = "Pendente Cadastro"
STATUS_REGISTRATION_IN_PROGRESS = "Cadastro em Andamento"
STATUS_REJECTED_DOCUMENTS = "Reprovado – Pendência de Documentação"
STATUS_AGENCY_REVIEW = "Análise do Órgão"
STATUS_PENDING_RELEASE = "Pendente Liberação"
STATUS_RELEASED = "Liberada"

LICENSE_STATUSES = (
    STATUS_PENDING_REGISTRATION,
    STATUS_REGISTRATION_IN_PROGRESS,
    STATUS_REJECTED_DOCUMENTS,
    STATUS_AGENCY_REVIEW,
    STATUS_PENDING_RELEASE,
    STATUS_RELEASED,
)

STATES = (
    "SP", "MG", "MT", "PE", "TO", "MS", "PR", "ES",
    "DNIT", "RS", "BA", "PA", "SC", "DF", "MA",
    "GO", "RJ", "CE", "AL", "SE",
)

# Optional vehicle-role columns each set type may fill (primary is always required)
ROLE_FIELDS = ("first_trailer_id", "dolly_id", "second_trailer_id")


def allowed_roles(set_type: str) -> set:
    if set_type.startswith("Rodotrem"):
        return {"first_trailer_id", "dolly_id", "second_trailer_id"}
    if set_type.startswith("Bitrem"):
        return {"first_trailer_id", "second_trailer_id"}
    if set_type == "Prancha":
        return {"first_trailer_id"}
    return set()
