"""Contact form handler — validate, spam-screen and forward website contact submissions.

Public API re-exported here for convenience::

    from contact_form import ContactFormConfig, ContactFormHandler, handler
"""

from .classifier import BedrockClassifier
from .config import BlockedSubmissionsConfig, ContactFormConfig, SpamDetectionConfig
from .errors import (
    ClassificationError,
    ContactFormError,
    DecodeError,
    RecorderError,
    SendError,
    ValidationError,
)
from .handler import ContactFormHandler, handler
from .logging import setup_logging
from .models import (
    BlockedSubmissionRecord,
    Classification,
    ClassificationResult,
    Decision,
    Submission,
)
from .notifier import SesNotifier
from .policy import decide
from .recorder import BlockedSubmissionRecorder

__all__ = [
    "BedrockClassifier",
    "BlockedSubmissionRecord",
    "BlockedSubmissionRecorder",
    "BlockedSubmissionsConfig",
    "Classification",
    "ClassificationError",
    "ClassificationResult",
    "ContactFormConfig",
    "ContactFormError",
    "ContactFormHandler",
    "Decision",
    "DecodeError",
    "RecorderError",
    "SendError",
    "SesNotifier",
    "SpamDetectionConfig",
    "Submission",
    "ValidationError",
    "decide",
    "handler",
    "setup_logging",
]
