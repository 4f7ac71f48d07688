from .classifier import MESSAGES, Alert, AlertKind, classify_alerts  # noqa

__all__ = ["Alert", "AlertKind", "MESSAGES", "classify_alerts"]
