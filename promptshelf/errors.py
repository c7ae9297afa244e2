from enum import Enum


class ErrorCode(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"
    MISSING_FIELD = "missing_field"
    INVALID_PAYLOAD = "invalid_payload"


class PromptShelfError(Exception):
    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    @classmethod
    def missing_id(cls) -> "PromptShelfError":
        return cls(ErrorCode.VALIDATION, "Prompt must have an id")

    @classmethod
    def already_exists(cls, prompt_id: str) -> "PromptShelfError":
        return cls(
            ErrorCode.VALIDATION, f"Prompt with id '{prompt_id}' already exists"
        )

    @classmethod
    def invalid_record(cls, detail: str) -> "PromptShelfError":
        return cls(ErrorCode.VALIDATION, f"Invalid prompt: {detail}")

    @classmethod
    def not_found(cls, prompt_id: str) -> "PromptShelfError":
        return cls(ErrorCode.NOT_FOUND, f"Prompt with id '{prompt_id}' not found")

    @classmethod
    def io_failure(cls, detail: str) -> "PromptShelfError":
        return cls(ErrorCode.IO_FAILURE, f"Storage error: {detail}")

    @classmethod
    def missing_field(cls, name: str) -> "PromptShelfError":
        return cls(ErrorCode.MISSING_FIELD, f"Missing '{name}' field in request")

    @classmethod
    def invalid_payload(cls, detail: str) -> "PromptShelfError":
        return cls(ErrorCode.INVALID_PAYLOAD, f"Invalid payload: {detail}")
