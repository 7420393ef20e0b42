"""Utility functions for masking sensitive data in logs."""


def mask_phone(phone: str) -> str:
    """
    Mask phone number for logging purposes.

    Telegram delivers phone numbers with or without a leading ``+``.

    Example: 918777845713 -> ***5713, +905551234567 -> +***4567

    Args:
        phone: Phone number to mask

    Returns:
        Masked phone number
    """
    if not phone or len(phone) < 4:
        return "***"

    if phone.startswith("+"):
        return "+" + "***" + phone[-4:]
    return "***" + phone[-4:]


def mask_session_id(session_id: str) -> str:
    """
    Mask a website session id, keeping a short prefix for correlation.

    Example: 8f14e45fceea167a -> 8f14…(16)
    """
    if not session_id:
        return "***"
    if len(session_id) <= 6:
        return "***"
    return f"{session_id[:4]}…({len(session_id)})"
