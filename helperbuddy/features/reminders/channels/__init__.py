"""Delivery channels for reminders: email and SMS senders plus message templates."""

from __future__ import annotations

from .base import ReminderEmailSender, ReminderSmsSender
from .email import EmailSender, build_email_sender
from .sms import SmsSender, build_sms_sender
from .templates import render_email, render_sms, render_subject

__all__ = [
    "EmailSender",
    "ReminderEmailSender",
    "ReminderSmsSender",
    "SmsSender",
    "build_email_sender",
    "build_sms_sender",
    "render_email",
    "render_sms",
    "render_subject",
]
