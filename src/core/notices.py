"""User-facing notice texts.

All notices are transient: the pipeline schedules each one for deletion
right after it is sent.
"""

from __future__ import annotations

START_VERIFIED = "✅ Вы уже подтверждены!"
START_INSTRUCTIONS = "👋 Для доступа к группе:\n1. Оставайтесь в группе\n2. Отправьте /confirm здесь"
ALREADY_VERIFIED = "ℹ️ Вы уже подтверждены"
VERIFIED = "✅ Вы подтверждены!"
ADMIN_VERIFIED = "👑 Админ подтверждён!"
NOT_A_MEMBER = "❌ Вы должны быть участником группы для подтверждения!"
MEMBERSHIP_CHECK_FAILED = "⚠️ Ошибка проверки членства в группе. Попробуйте позже."
TRY_LATER = "⚠️ Ошибка. Попробуйте позже"


def confirm_required(first_name: str) -> str:
    return f"{first_name}, для доступа отправьте /confirm"


def rules_violation(first_name: str) -> str:
    return f"{first_name}, ваше сообщение нарушает правила чата!"
