"""Render notification content for the email and SMS channels."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Final

from app.domain.entities import Notification, NotificationType
from app.infrastructure.delivery import EmailContent

SMS_MAX_LENGTH: Final[int] = 160
_SMS_ELLIPSIS: Final[str] = "..."


@dataclass(frozen=True)
class EmailTemplate:
    """Static parts of an email for one notification type.

    ``subject_prefix`` and ``heading`` of ``None`` fall back to the
    notification title.
    """

    subject_prefix: str | None
    heading: str | None
    action_label: str
    text_action_label: str
    button_background: str
    button_color: str
    signature: str


_GENERIC_TEMPLATE: Final[EmailTemplate] = EmailTemplate(
    subject_prefix=None,
    heading=None,
    action_label="View Details",
    text_action_label="View details",
    button_background="#007bff",
    button_color="white",
    signature="{brand} System",
)

EMAIL_TEMPLATES: Final[dict[NotificationType, EmailTemplate]] = {
    NotificationType.TRAINING_PROGRESS: EmailTemplate(
        subject_prefix="Training Progress Update",
        heading="Training Progress Update",
        action_label="View Details",
        text_action_label="View details",
        button_background="#007bff",
        button_color="white",
        signature="{brand} Training Team",
    ),
    NotificationType.PAYMENT_REMINDER: EmailTemplate(
        subject_prefix="Payment Reminder",
        heading="Payment Reminder",
        action_label="Process Payment",
        text_action_label="Process payment",
        button_background="#28a745",
        button_color="white",
        signature="{brand} Finance Team",
    ),
    NotificationType.EVALUATION_DUE: EmailTemplate(
        subject_prefix="Evaluation Due",
        heading="Evaluation Due",
        action_label="Complete Evaluation",
        text_action_label="Complete evaluation",
        button_background="#ffc107",
        button_color="black",
        signature="{brand} Training Team",
    ),
    NotificationType.GENERIC: _GENERIC_TEMPLATE,
}


def get_email_template(notification_type: NotificationType) -> EmailTemplate:
    return EMAIL_TEMPLATES.get(notification_type, _GENERIC_TEMPLATE)


def build_action_link(notification: Notification, base_url: str) -> str | None:
    if not notification.action_url:
        return None
    return f"{base_url}{notification.action_url}"


def render_email(notification: Notification, *, base_url: str, brand: str) -> EmailContent:
    """Return subject, HTML and plain-text bodies for ``notification``."""

    template = get_email_template(notification.type)
    recipient_name = notification.recipient.name if notification.recipient else ""
    heading = template.heading or notification.title
    signature = template.signature.format(brand=brand)
    link = build_action_link(notification, base_url)

    if template.subject_prefix:
        subject = f"{template.subject_prefix} - {notification.title}"
    else:
        subject = notification.title

    html_parts = [
        f"<h2>{escape(heading)}</h2>",
        f"<p>Dear {escape(recipient_name)},</p>",
        f"<p>{escape(notification.message)}</p>",
    ]
    if link:
        html_parts.append(
            f'<p><a href="{escape(link, quote=True)}" style="background: '
            f"{template.button_background}; color: {template.button_color}; "
            'padding: 10px 20px; text-decoration: none; border-radius: 5px;">'
            f"{template.action_label}</a></p>"
        )
    html_parts.append(f"<p>Best regards,<br>{escape(signature)}</p>")

    text = f"{heading}\n\nDear {recipient_name},\n\n{notification.message}\n\n"
    if link:
        text += f"{template.text_action_label}: {link}\n\n"
    text += f"Best regards,\n{signature}"

    return EmailContent(subject=subject, html="\n".join(html_parts), text=text)


def truncate_sms(message: str) -> str:
    """Cut ``message`` to a single SMS segment, ending in ``...`` when cut."""

    if len(message) <= SMS_MAX_LENGTH:
        return message
    return message[: SMS_MAX_LENGTH - len(_SMS_ELLIPSIS)] + _SMS_ELLIPSIS


def render_sms(notification: Notification, *, base_url: str, brand: str) -> str:
    message = f"{brand}: {notification.title}\n{notification.message}"
    link = build_action_link(notification, base_url)
    if link:
        message += f"\nView: {link}"
    return truncate_sms(message)


__all__ = [
    "EMAIL_TEMPLATES",
    "EmailTemplate",
    "SMS_MAX_LENGTH",
    "build_action_link",
    "get_email_template",
    "render_email",
    "render_sms",
    "truncate_sms",
]
