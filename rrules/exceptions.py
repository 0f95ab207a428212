"""
Exceptions raised while building recurrence rules.

Every failure surfaces at construction time. Generating occurrences from a
rule that was built successfully never raises.
"""


class RecurrenceError(ValueError):
    """Base exception for invalid recurrence rules."""

    def __init__(self, message: str, attribute: str | None = None):
        super().__init__(message)
        self.message = message
        self.attribute = attribute


class MissingRequiredAttribute(RecurrenceError):
    """One of FREQ, INTERVAL or DTSTART is absent."""

    def __init__(self, attribute: str):
        super().__init__(f"Missing required attribute: {attribute}", attribute)


class UnknownFrequency(RecurrenceError):
    """FREQ value is not one of the supported frequencies."""

    def __init__(self, value: str):
        super().__init__(f"Unknown frequency: {value!r}", "FREQ")
        self.value = value


class UnsupportedAttributeForFrequency(RecurrenceError):
    """
    Attribute is valid in the grammar but not for the declared frequency.

    E.g. BYTIME with FREQ=WEEKLY.
    """

    def __init__(self, attribute: str, frequency: str):
        super().__init__(
            f"Attribute {attribute} is not supported with FREQ={frequency}",
            attribute,
        )
        self.frequency = frequency


class UnknownAttribute(RecurrenceError):
    """
    Attribute is outside the supported grammar.

    Covers standard keys this library does not implement
    (COUNT, UNTIL, EXDATE, WKST, ...).
    """

    def __init__(self, attribute: str):
        super().__init__(f"Unknown attribute: {attribute}", attribute)


class InvalidValue(RecurrenceError):
    """Attribute value fails its grammar or range."""

    def __init__(self, attribute: str, reason: str):
        super().__init__(f"Invalid value for {attribute}: {reason}", attribute)
        self.reason = reason
