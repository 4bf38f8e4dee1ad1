import enum


class ErrorCode(enum.IntEnum):
    BAD_VALUE = 2
    FAILED_TO_PARSE = 9
    TYPE_MISMATCH = 14
    PATH_NOT_VIABLE = 28
    CONFLICTING_UPDATE_OPERATORS = 40
    EMPTY_FIELD_NAME = 56
    IMMUTABLE_FIELD = 66

    @property
    def code_name(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class UpdateError(ValueError):
    """
    Base class for every failure surfaced by an update call.

    `code` and `message` match what a MongoDB server reports for the same
    update, so callers can forward them into their own error envelope.
    """

    default_code = ErrorCode.BAD_VALUE

    def __init__(self, message: str, code: ErrorCode | None = None):
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code if code is not None else self.default_code)

    @property
    def code_name(self) -> str:
        return self.code.code_name

    def __repr__(self):
        return f"{type(self).__name__}(code={int(self.code)}, message={self.message!r})"


class PathSyntaxError(UpdateError):
    default_code = ErrorCode.EMPTY_FIELD_NAME


class PathTypeMismatch(UpdateError):
    """A path addresses a node whose type cannot be used that way."""

    default_code = ErrorCode.PATH_NOT_VIABLE

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        *,
        path: str = "",
        type_name: str = "",
    ):
        super().__init__(message, code)
        self.path = path
        self.type_name = type_name


class UnknownOperator(UpdateError):
    default_code = ErrorCode.FAILED_TO_PARSE

    def __init__(self, operator: str):
        super().__init__(
            f"Unknown modifier: {operator}. Expected a valid update modifier "
            "or pipeline-style update specified as an array"
        )
        self.operator = operator


class InvalidOperand(UpdateError):
    default_code = ErrorCode.FAILED_TO_PARSE


class ConflictingPaths(UpdateError):
    default_code = ErrorCode.CONFLICTING_UPDATE_OPERATORS


class ImmutableField(UpdateError):
    default_code = ErrorCode.IMMUTABLE_FIELD


class BadValue(UpdateError):
    default_code = ErrorCode.BAD_VALUE
