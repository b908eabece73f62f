"""Application constants.

Date format rules, identifier prefixes, oracle prompt and demo seed data.
"""

import re

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
DATE_PATTERN: re.Pattern[str] = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MANUAL_ID_PREFIX: str = "manual_"
BATCH_LINE_SEPARATOR: str = "|"
BATCH_LINE_MIN_FIELDS: int = 4

# ---------------------------------------------------------------------------
# Extraction oracle
# Key of the "no vacation" sentinel: {"vacation": null}
# ---------------------------------------------------------------------------
NO_VACATION_KEY: str = "vacation"
REQUIRED_CANDIDATE_FIELDS: tuple[str, ...] = ("employee_name", "start_date", "end_date")

# Instruction set sent as the system message.  ``{year}`` is filled from
# ``settings.VACATION_DEFAULT_YEAR``.
VACATION_SYSTEM_PROMPT_TEMPLATE: str = """\
Ты - парсер отпусков. Извлеки из сообщения информацию об отпуске.

ПРАВИЛА:
- Извлеки имя сотрудника и даты начала/конца отпуска
- Если год не указан - используй {year}
- Если указан только один день, сделай start_date и end_date одинаковыми
- Формат дат: YYYY-MM-DD
- Отвечай ТОЛЬКО валидным JSON без дополнительного текста
- Если в сообщении нет информации об отпуске - верни {{"vacation": null}}

ФОРМАТ ОТВЕТА (JSON):
{{
  "employee_name": "имя",
  "start_date": "YYYY-MM-DD",
  "end_date": "YYYY-MM-DD"
}}

ПРИМЕРЫ:
ВХОД: "Уезжаю 15-25 июля"
ВЫХОД: {{"employee_name": "Иван", "start_date": "{year}-07-15", "end_date": "{year}-07-25"}}

ВХОД: "С 1 по 10 сентября буду в отпуске"
ВЫХОД: {{"employee_name": "Мария", "start_date": "{year}-09-01", "end_date": "{year}-09-10"}}

ВХОД: "Привет всем!"
ВЫХОД: {{"vacation": null}}
"""

# ---------------------------------------------------------------------------
# Demo data for `vacation-calendar seed`
# ---------------------------------------------------------------------------
SEED_VACATIONS: list[dict[str, str]] = [
    {
        "employee_name": "Иван Иванов",
        "employee_id": "user_001",
        "start_date": "2026-06-01",
        "end_date": "2026-06-15",
        "message_text": "Отпуск 1-15 июня",
    },
    {
        "employee_name": "Мария Петрова",
        "employee_id": "user_002",
        "start_date": "2026-07-10",
        "end_date": "2026-07-24",
        "message_text": "Уезжаю 10-24 июля",
    },
    {
        "employee_name": "Алексей Сидоров",
        "employee_id": "user_003",
        "start_date": "2026-08-01",
        "end_date": "2026-08-31",
        "message_text": "Весь август в отпуску",
    },
    {
        "employee_name": "Елена Кузнецова",
        "employee_id": "user_004",
        "start_date": "2026-06-20",
        "end_date": "2026-07-05",
        "message_text": "С 20 июня на 2 недели",
    },
    {
        "employee_name": "Дмитрий Волков",
        "employee_id": "user_005",
        "start_date": "2026-09-01",
        "end_date": "2026-09-14",
        "message_text": "Отпуск 1-14 сентября",
    },
    {
        "employee_name": "Анна Соколова",
        "employee_id": "user_006",
        "start_date": "2026-07-01",
        "end_date": "2026-07-15",
        "message_text": "Отпуск в июле",
    },
]
