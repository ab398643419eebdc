"""Classification of SQLite error messages into user-safe client errors."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from dryrun_store.domain.exceptions import ClientError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Error with database"


@dataclass(frozen=True)
class ClassificationRule:
    """One message pattern and the client message it produces."""

    name: str
    pattern: re.Pattern[str]
    render: Callable[[re.Match[str]], str]


# Order matters: the first matching rule wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "unique",
        re.compile(r"UNIQUE constraint failed: (\w+)\.(\w+)"),
        lambda m: f"The value for column '{m[2]}' in table '{m[1]}' already exists and must be unique.",
    ),
    ClassificationRule(
        "not_null",
        re.compile(r"NOT NULL constraint failed: (\w+)\.(\w+)"),
        lambda m: f"The column '{m[2]}' in table '{m[1]}' is required and cannot be null.",
    ),
    ClassificationRule(
        "no_such_column",
        re.compile(r"no such column: (\w+)"),
        lambda m: f"The column '{m[1]}' does not exist in the table.",
    ),
    ClassificationRule(
        "datatype_mismatch",
        re.compile(re.escape("datatype mismatch")),
        lambda m: "Invalid data type for one or more columns. Please check that the types match the table schema.",
    ),
    ClassificationRule(
        "check",
        re.compile(r"CHECK constraint failed: (\w+)"),
        lambda m: f"The column '{m[1]}' does not satisfy the validation constraint.",
    ),
    ClassificationRule(
        "foreign_key",
        re.compile(re.escape("FOREIGN KEY constraint failed")),
        lambda m: "Foreign key constraint failed: one of the referenced values does not exist in the related table.",
    ),
    ClassificationRule(
        "no_such_table",
        re.compile(r"no such table: (\w+)"),
        lambda m: f"The table '{m[1]}' does not exist in the database.",
    ),
)


class SQLiteErrorClassifier:
    """Turns engine errors into ``ClientError`` instances.

    Every storage failure is treated as client-attributable; the original
    engine message is kept as the ``raw`` diagnostic.
    """

    def __init__(self, rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES):
        self.rules = rules

    def classify(self, error: BaseException | str) -> ClientError:
        """Classify an engine error.

        Args:
            error: Exception raised by the driver, or its message

        Returns:
            ClientError with a human-readable message and the raw engine text
        """
        message = error if isinstance(error, str) else str(error)

        for rule in self.rules:
            found = rule.pattern.search(message)
            if found:
                logger.debug(f"Classified storage error as {rule.name}")
                return ClientError(rule.render(found), raw=message)

        logger.warning(f"Unrecognized storage error: {message[:200]}")
        logger.debug(f"Unrecognized storage error (raw): {message}")
        return ClientError(FALLBACK_MESSAGE, raw=message)


default_classifier = SQLiteErrorClassifier()


def classify_error(error: BaseException | str) -> ClientError:
    """Classify with the default rule set."""
    return default_classifier.classify(error)
