"""
Internationalization (i18n) module for the back office API.

Provides locale detection from the Accept-Language header and bilingual
error messages. Error messages default to English, the language the front
end matches on; Russian is served when the client asks for it.
"""

from fastapi import Request

SUPPORTED_LOCALES = ("en", "ru")
DEFAULT_LOCALE = "en"


def get_locale(request: Request) -> str:
    """
    FastAPI dependency that reads the Accept-Language header and returns
    the best matching locale ('en' or 'ru'). Defaults to 'en'.
    """
    accept = request.headers.get("accept-language", "")
    for part in accept.split(","):
        lang = part.strip().split(";")[0].strip().lower()
        if lang.startswith("ru"):
            return "ru"
        if lang.startswith("en"):
            return "en"
    return DEFAULT_LOCALE


# ---------------------------------------------------------------------------
# Bilingual message catalogue
# ---------------------------------------------------------------------------
MESSAGES: dict[str, dict[str, str]] = {
    # ── Auth / Users ──────────────────────────────────────────────────────
    "login_fields_required": {
        "en": "Email and password are required",
        "ru": "Требуются email и пароль",
    },
    "register_fields_required": {
        "en": "Email, name, and password are required",
        "ru": "Требуются email, имя и пароль",
    },
    "invalid_credentials": {
        "en": "Invalid credentials",
        "ru": "Неверные учетные данные",
    },
    "not_authenticated": {
        "en": "Access token required",
        "ru": "Требуется токен доступа",
    },
    "invalid_token": {
        "en": "Invalid or expired token",
        "ru": "Недействительный или просроченный токен",
    },
    "admin_required": {
        "en": "Admin access required",
        "ru": "Требуются права администратора",
    },
    "email_already_exists": {
        "en": "User with this email already exists",
        "ru": "Пользователь с таким email уже существует",
    },
    "email_taken": {
        "en": "Email is already taken",
        "ru": "Email уже занят",
    },
    "admin_already_exists": {
        "en": "Admin user already exists",
        "ru": "Администратор уже существует",
    },
    "profile_fields_required": {
        "en": "Name and email are required",
        "ru": "Требуются имя и email",
    },
    "password_fields_required": {
        "en": "Current password and new password are required",
        "ru": "Требуются текущий и новый пароль",
    },
    "password_too_short": {
        "en": "New password must be at least 6 characters long",
        "ru": "Новый пароль должен содержать не менее 6 символов",
    },
    "current_password_incorrect": {
        "en": "Current password is incorrect",
        "ru": "Текущий пароль неверен",
    },
    "user_fields_required": {
        "en": "Name, email, and role are required",
        "ru": "Требуются имя, email и роль",
    },
    "invalid_role": {
        "en": "Role must be ADMIN or USER",
        "ru": "Роль должна быть ADMIN или USER",
    },
    "user_not_found": {
        "en": "User not found",
        "ru": "Пользователь не найден",
    },
    "cannot_delete_self": {
        "en": "Cannot delete your own account",
        "ru": "Нельзя удалить собственную учетную запись",
    },
    # ── Contractors ───────────────────────────────────────────────────────
    "contractor_fields_required": {
        "en": "Short name, full name, OGRN, INN, and legal address are required",
        "ru": "Требуются краткое и полное наименование, ОГРН, ИНН и юридический адрес",
    },
    "contractor_inn_exists": {
        "en": "Contractor with this INN already exists",
        "ru": "Контрагент с таким ИНН уже существует",
    },
    "contractor_not_found": {
        "en": "Contractor not found",
        "ru": "Контрагент не найден",
    },
    "customer_not_found": {
        "en": "Customer not found",
        "ru": "Заказчик не найден",
    },
    "contractor_in_use": {
        "en": "Contractor is referenced by existing documents",
        "ru": "Контрагент используется в документах",
    },
    # ── Documents ─────────────────────────────────────────────────────────
    "document_fields_required": {
        "en": "Type, customer ID, contractor ID, amount, and date are required",
        "ru": "Требуются тип, заказчик, исполнитель, сумма и дата",
    },
    "invalid_document_type": {
        "en": "Document type must be SHIPMENT or RENTAL",
        "ru": "Тип документа должен быть SHIPMENT или RENTAL",
    },
    "invalid_amount": {
        "en": "Amount must be a number",
        "ru": "Сумма должна быть числом",
    },
    "invalid_date": {
        "en": "Date is invalid",
        "ru": "Неверная дата",
    },
    "document_not_found": {
        "en": "Document not found",
        "ru": "Документ не найден",
    },
    "document_not_ready": {
        "en": "Document is not ready for download",
        "ru": "Документ еще не готов к скачиванию",
    },
    "document_url_missing": {
        "en": "Document URL not available",
        "ru": "Ссылка на документ недоступна",
    },
    "document_access_denied": {
        "en": "Access denied",
        "ru": "Доступ запрещен",
    },
    "callback_rejected": {
        "en": "Document is already finalized",
        "ru": "Документ уже обработан",
    },
    "callback_forbidden": {
        "en": "Invalid webhook secret",
        "ru": "Неверный секрет вебхука",
    },
    # ── Generic ───────────────────────────────────────────────────────────
    "invalid_request": {
        "en": "Invalid request",
        "ru": "Некорректный запрос",
    },
    "internal_error": {
        "en": "Internal server error",
        "ru": "Внутренняя ошибка сервера",
    },
}


def translate(key: str, locale: str = DEFAULT_LOCALE, **kwargs) -> str:
    """
    Return the message for ``key`` in ``locale``.

    Unknown keys are returned as-is so a missing entry never turns into a
    500. Keyword arguments are interpolated with ``str.format``.
    """
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    text = entry.get(locale) or entry[DEFAULT_LOCALE]
    if kwargs:
        text = text.format(**kwargs)
    return text
