"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import ScheduleCategory, ShiftCode

MAX_DAYS_IN_MONTH = 31

# Display order of the grid; titles not listed sort after these.
JOB_TITLE_PRIORITY = (
    "Enfermeira",
    "Técnico de Enfermagem",
    "Cuidador de Idosos",
    "Médico",
    "Nutricionista",
    "Fisioterapeuta",
    "Psicóloga",
    "Assistente social",
    "Cozinheira",
    "Auxiliar de Serviços Gerais",
    "Professora de Yoga",
)

# None means every job title of the unit.
CATEGORY_JOB_TITLES = {
    ScheduleCategory.GERAL: None,
    ScheduleCategory.ENFERMAGEM: frozenset({"Enfermeira", "Técnico de Enfermagem", "Cuidador de Idosos"}),
    ScheduleCategory.NUTRICAO: frozenset({"Nutricionista", "Cozinheira"}),
}

ROTATION_CADENCE_DAYS = {
    ShiftCode.DUTY_24H: 3,
    ShiftCode.DUTY_12H: 2,
}

ALL_UNITS = "Ambas"

DEFAULT_SUBSTITUTION_REASON = "Substituição"
SUBSTITUTION_REASONS = (
    "Substituição",
    "Falta",
    "Atestado",
    "Férias",
    "Licença",
    "Curinga",
    "Emergência",
    "Outro",
)

PLACEHOLDER_LABEL_PREFIX = "Vaga"
UNKNOWN_SUBJECT_NAME = "Desconhecido"
FLOATER_LABEL_SUFFIX = "(CURINGA)"
FLOATER_JOB_TITLE = "Curinga/Substituto"

DEFAULT_INSTITUTION_NAME = "ACASA Residencial Sênior"

MONTH_NAMES = (
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
)
