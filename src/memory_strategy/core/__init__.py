from .base import ApplicationError, ErrorCode, ErrorLevel
from .errors import DuplicateKeyError, InvalidArgumentError, NotFoundError
