from .messages import safe_edit_message_text, edit_or_answer
from .notifications import Notifier

__all__ = [
    'safe_edit_message_text',
    'edit_or_answer',
    'Notifier',
    'format_sum',
]


def format_sum(amount: int) -> str:
    """Render so'm amounts grouped by thousands: 1 250 000."""
    return f'{int(amount):,}'.replace(',', ' ')
