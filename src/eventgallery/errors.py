"""
Error classification for eventgallery.

Every error carries a category, severity and a user-facing message, and is
logged through the structured logger when it is created. None of these
errors is fatal to a running session: transcode errors are batch-local and
persistence errors only cost durability.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from eventgallery.logging_config import log_error


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    IMAGE_PROCESSING = "image_processing"
    PERSISTENCE = "persistence"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class ErrorInfo:
    """Structured error information."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert error info to dictionary."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
        }


class GalleryError(Exception):
    """Base exception class for eventgallery."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.code = code or f"{category.value}_error"
        self.user_message = user_message or self._generate_user_message()
        self.details = details or {}
        self.recoverable = recoverable
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        # Log the error
        self._log_error()

    def _generate_user_message(self) -> str:
        """Generate user-friendly error message."""
        user_messages = {
            ErrorCategory.IMAGE_PROCESSING: "画像の処理中にエラーが発生しました。",
            ErrorCategory.PERSISTENCE: "データの保存中にエラーが発生しました。",
            ErrorCategory.VALIDATION: "入力データに問題があります。",
            ErrorCategory.UNKNOWN: "予期しないエラーが発生しました。",
        }
        return user_messages.get(self.category, "エラーが発生しました。")

    def _log_error(self) -> None:
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            **self.details,
        }

        # Keep the cause readable in JSON output
        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        log_error(self, error_context)

    def get_error_info(self) -> ErrorInfo:
        """Get structured error information."""
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
        )


# Specific error classes for the photo pipeline
class TranscodeError(GalleryError):
    """A single image could not be turned into a photo record."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.IMAGE_PROCESSING,
            severity=ErrorSeverity.MEDIUM,
            code=code or "transcode_failed",
            user_message=user_message or "画像の処理中にエラーが発生しました。ファイル形式を確認してください。",
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class DecodeError(TranscodeError):
    """The input bytes could not be interpreted as an image."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        self.filename = filename
        super().__init__(
            message=message,
            code="decode_failed",
            user_message=f"ファイル '{filename}' は画像として読み込めませんでした。" if filename else None,
            details={"filename": filename, **(details or {})},
            original_exception=original_exception,
        )


class EncodeError(TranscodeError):
    """The decoded image could not be re-encoded."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        self.filename = filename
        super().__init__(
            message=message,
            code="encode_failed",
            details={"filename": filename, **(details or {})},
            original_exception=original_exception,
        )


# Errors from the durable key/value layer
class PersistenceError(GalleryError):
    """The durable mirror could not be written or read."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.PERSISTENCE,
            severity=ErrorSeverity.HIGH,
            code=code or "persistence_failed",
            user_message=user_message or "データの保存に失敗しました。表示中のデータは保持されています。",
            details=details,
            recoverable=True,
            original_exception=original_exception,
        )


class PersistenceQuotaExceeded(PersistenceError):
    """A durable write was rejected because it would exceed the quota."""

    def __init__(
        self,
        key: str,
        required_bytes: int,
        quota_bytes: int | None,
        original_exception: Exception | None = None,
    ):
        self.key = key
        self.required_bytes = required_bytes
        self.quota_bytes = quota_bytes
        super().__init__(
            f"Writing '{key}' needs {required_bytes} bytes, quota is {quota_bytes}",
            code="quota_exceeded",
            user_message="ストレージ容量が不足しています。古い写真は次回起動時に表示されない場合があります。",
            details={"key": key, "required_bytes": required_bytes, "quota_bytes": quota_bytes},
            original_exception=original_exception,
        )


class PersistenceCorrupt(PersistenceError):
    """A stored blob could not be parsed."""

    def __init__(self, key: str, reason: str, original_exception: Exception | None = None):
        self.key = key
        super().__init__(
            f"Stored value for '{key}' is unreadable: {reason}",
            code="persistence_corrupt",
            details={"key": key, "reason": reason},
            original_exception=original_exception,
        )
